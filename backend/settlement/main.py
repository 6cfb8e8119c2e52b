"""FastAPI entry point for administrative action processing."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import processing_config
from .routers import actions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Action processing ready (max iterations: {processing_config.max_iterations or 'per bid count'})"
    )
    yield


app = FastAPI(
    title="Pickup Settlement Engine",
    description="Batch settlement of pickup bids and drop requests for league years",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(actions.router, prefix="/api/actions", tags=["actions"])


@app.get("/api/health")
def health():
    return {"status": "ok"}
