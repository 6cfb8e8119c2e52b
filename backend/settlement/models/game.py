"""Catalog entries (games) and the roster entries that own them."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class CatalogEntry(BaseModel):
    id: str
    name: str
    release_date: Optional[date] = None
    minimum_release_date: Optional[date] = None
    maximum_release_date: Optional[date] = None
    tags: list = []
    projected_points: Optional[float] = None

    def will_release_in(self, year: int) -> bool:
        """True when the game is out, or is estimated to be out, by the end of *year*."""
        if self.release_date is not None:
            return self.release_date.year <= year
        if self.minimum_release_date is not None and self.minimum_release_date.year > year:
            return False
        if self.maximum_release_date is None:
            return False
        return self.maximum_release_date.year <= year


class RosterEntry(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    publisher_id: str
    game_name: str
    game: Optional[CatalogEntry] = None  # None for unlinked placeholder names
    timestamp: datetime = Field(default_factory=datetime.now)
    counter_pick: bool = False
    slot_number: int = 0
    manual_will_not_release: bool = False
    fantasy_points: Optional[float] = None

    @property
    def game_id(self) -> Optional[str]:
        return self.game.id if self.game is not None else None

    def will_release(self, year: int) -> bool:
        if self.manual_will_not_release or self.game is None:
            return False
        return self.game.will_release_in(year)


class RemovedRosterEntry(BaseModel):
    entry: RosterEntry
    removal_reason: str
    removed_at: datetime = Field(default_factory=datetime.now)


DROPPED_BY_PLAYER = "Dropped by player"
CONDITIONALLY_DROPPED_BY_PLAYER = "Conditionally dropped by player"
