"""Player-submitted actions (pickup bids, drop requests) and their audit trail."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .game import CatalogEntry, RosterEntry
from .results import Result


def utc_timestamp(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PickupBid(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    publisher_id: str
    league_id: str
    year: int
    game: CatalogEntry
    bid_amount: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    priority: int = Field(1, ge=1)  # lower wins among this publisher's bids
    conditional_drop_entry: Optional[RosterEntry] = None

    # Outcome: None while pending
    successful: Optional[bool] = None
    # Cached verdict of the conditional drop check from the latest pass
    conditional_drop_result: Optional[Result] = None

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        # Naive submissions are taken as UTC so every bid timestamp compares
        return utc_timestamp(value)

    @property
    def league_year_key(self) -> tuple[str, int]:
        return (self.league_id, self.year)

    @property
    def has_valid_conditional_drop(self) -> bool:
        return (
            self.conditional_drop_entry is not None
            and self.conditional_drop_result is not None
            and self.conditional_drop_result.is_success
        )


class FailedPickupBid(BaseModel):
    bid: PickupBid
    failure_reason: str


class DropRequest(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    publisher_id: str
    league_id: str
    year: int
    entry: RosterEntry
    timestamp: datetime = Field(default_factory=datetime.now)
    successful: Optional[bool] = None

    @property
    def league_year_key(self) -> tuple[str, int]:
        return (self.league_id, self.year)


class FailedDropRequest(BaseModel):
    drop: DropRequest
    failure_reason: str


class ProcessedBidSet(BaseModel):
    """Winning and terminally failed bids from one bid pass."""
    success_bids: list[PickupBid] = []
    failed_bids: list[FailedPickupBid] = []

    @property
    def processed_bid_ids(self) -> set[str]:
        return {b.id for b in self.success_bids} | {f.bid.id for f in self.failed_bids}

    def append_set(self, other: ProcessedBidSet) -> ProcessedBidSet:
        return ProcessedBidSet(
            success_bids=self.success_bids + other.success_bids,
            failed_bids=self.failed_bids + other.failed_bids,
        )


# ---------------------------------------------------------------------------
# Audit trail
# ---------------------------------------------------------------------------

PICKUP_SUCCESSFUL = "Pickup Successful"
PICKUP_FAILED = "Pickup Failed"
DROP_SUCCESSFUL = "Drop Successful"
DROP_FAILED = "Drop Failed"


class LeagueAction(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    publisher_id: str
    league_id: str
    year: int
    timestamp: datetime
    action_type: str
    description: str
    manager_action: bool = False

    @classmethod
    def for_successful_bid(cls, bid: PickupBid, timestamp: datetime) -> LeagueAction:
        return cls(
            publisher_id=bid.publisher_id, league_id=bid.league_id, year=bid.year,
            timestamp=timestamp, action_type=PICKUP_SUCCESSFUL,
            description=f"Acquired '{bid.game.name}' with a bid of ${bid.bid_amount}",
        )

    @classmethod
    def for_failed_bid(cls, failed: FailedPickupBid, timestamp: datetime) -> LeagueAction:
        bid = failed.bid
        return cls(
            publisher_id=bid.publisher_id, league_id=bid.league_id, year=bid.year,
            timestamp=timestamp, action_type=PICKUP_FAILED,
            description=(
                f"Tried to acquire '{bid.game.name}' with a bid of ${bid.bid_amount} "
                f"but failed because: {failed.failure_reason}"
            ),
        )

    @classmethod
    def for_successful_drop(cls, drop: DropRequest, timestamp: datetime) -> LeagueAction:
        return cls(
            publisher_id=drop.publisher_id, league_id=drop.league_id, year=drop.year,
            timestamp=timestamp, action_type=DROP_SUCCESSFUL,
            description=f"Dropped game: '{drop.entry.game_name}'",
        )

    @classmethod
    def for_failed_drop(cls, failed: FailedDropRequest, timestamp: datetime) -> LeagueAction:
        drop = failed.drop
        return cls(
            publisher_id=drop.publisher_id, league_id=drop.league_id, year=drop.year,
            timestamp=timestamp, action_type=DROP_FAILED,
            description=(
                f"Tried to drop game: '{drop.entry.game_name}' "
                f"but failed because: {failed.failure_reason}"
            ),
        )

    @classmethod
    def for_conditional_drop(cls, bid: PickupBid, timestamp: datetime) -> LeagueAction:
        entry = bid.conditional_drop_entry
        return cls(
            publisher_id=bid.publisher_id, league_id=bid.league_id, year=bid.year,
            timestamp=timestamp, action_type=DROP_SUCCESSFUL,
            description=f"Dropped game: '{entry.game_name}' (conditional drop for '{bid.game.name}')",
        )
