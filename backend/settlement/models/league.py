"""League-year options and system-wide scoring constants."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LeagueOptions(BaseModel):
    standard_games: int = Field(12, ge=0)
    counter_picks: int = Field(3, ge=0)
    minimum_bid_amount: int = Field(0, ge=0)

    # Drop allowances; None means unlimited
    free_droppable_games: Optional[int] = Field(3, ge=0)
    will_release_droppable_games: Optional[int] = Field(0, ge=0)
    will_not_release_droppable_games: Optional[int] = Field(3, ge=0)

    counter_picks_block_drops: bool = False

    @staticmethod
    def allowance_open(allowance: Optional[int], used: int) -> bool:
        return allowance is None or allowance > used


class LeagueYear(BaseModel):
    league_id: str
    year: int
    league_name: str = ""
    options: LeagueOptions = LeagueOptions()
    finished: bool = False

    @property
    def key(self) -> tuple[str, int]:
        return (self.league_id, self.year)

    def __str__(self) -> str:
        name = self.league_name or self.league_id
        return f"{name} ({self.year})"


class SystemWideValues(BaseModel):
    """League-wide scoring averages used for projecting empty slots."""
    average_standard_game_points: float = 20.0
    average_counter_pick_points: float = -5.0
