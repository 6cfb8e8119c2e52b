"""Administrative action processing endpoints.

Nothing here persists: each request carries the full pending state and
receives the settlement results for the caller to commit.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ..config import processing_config
from ..models.actions import DropRequest, PickupBid
from ..models.league import LeagueYear, SystemWideValues
from ..models.processing import FinalizedActionProcessingResults
from ..models.publisher import Publisher
from ..services.action_export import export_league_actions
from ..services.action_processing import finalize_action_processing, process_actions

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ProcessActionsRequest(BaseModel):
    league_years: List[LeagueYear]
    publishers: List[Publisher]
    bids: List[PickupBid] = []
    drops: List[DropRequest] = []
    system_wide_values: Optional[SystemWideValues] = None
    process_name: Optional[str] = None
    process_time: Optional[datetime] = None


def _run(req: ProcessActionsRequest) -> FinalizedActionProcessingResults:
    process_time = req.process_time or processing_config.now()
    try:
        results = process_actions(
            req.league_years,
            req.publishers,
            req.bids,
            req.drops,
            system_wide_values=req.system_wide_values,
            process_time=process_time,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return finalize_action_processing(results, process_time, req.process_name)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/process")
async def process_actions_endpoint(req: ProcessActionsRequest):
    """Settle all pending drops and bids and return the results."""
    finalized = _run(req)
    logger.info(f"Action processing set {finalized.process_set_id} ({finalized.process_name}) complete")
    return {
        **finalized.model_dump(mode="json"),
        "league_action_sets": [s.model_dump(mode="json") for s in finalized.league_action_sets()],
    }


@router.post("/export")
async def export_actions_endpoint(
    req: ProcessActionsRequest,
    format: str = Query("csv", description="Export format: 'csv' or 'xlsx'"),
):
    """Settle the pending actions and download the resulting league actions."""
    finalized = _run(req)
    buf, media_type, filename = export_league_actions(finalized.results, format)
    return StreamingResponse(
        buf,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
