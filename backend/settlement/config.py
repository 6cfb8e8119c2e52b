"""Action processing configuration."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from .models.league import SystemWideValues


class ProcessingConfig(BaseModel):
    default_process_name: str = "Scheduled Action Processing"

    # Upper bound on bid-phase passes per run. None = number of pending bids.
    max_iterations: Optional[int] = Field(None, ge=1)

    # Averages used when projecting remaining-season points for tie-breaks
    system_wide_values: SystemWideValues = SystemWideValues()

    # IANA zone used to stamp runs that are not given an explicit process time
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def now(self) -> datetime:
        return datetime.now(ZoneInfo(self.timezone))


# Default processing config singleton
processing_config = ProcessingConfig()
