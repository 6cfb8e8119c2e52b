"""Publisher aggregate: roster, budget and drop counters for one league-year."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..exceptions import ActionProcessingError
from .game import RosterEntry
from .league import LeagueOptions
from .results import Result


class Publisher(BaseModel):
    """One competitor's state within a league-year.

    Roster and budget change only through ``acquire_game`` and ``drop_game``.
    ``drop_game`` must follow a passing ``can_drop_game``; calling it
    otherwise raises ``ActionProcessingError``.
    """

    id: str
    league_id: str
    year: int
    user_id: str = ""
    name: str
    draft_position: int = 0
    budget: int = Field(100, ge=0)
    free_games_dropped: int = 0
    will_release_games_dropped: int = 0
    will_not_release_games_dropped: int = 0
    games: list[RosterEntry] = []
    auto_draft: bool = False

    @property
    def league_year_key(self) -> tuple[str, int]:
        return (self.league_id, self.year)

    @property
    def standard_games(self) -> list[RosterEntry]:
        return sorted((g for g in self.games if not g.counter_pick), key=lambda g: g.slot_number)

    @property
    def counter_picks(self) -> list[RosterEntry]:
        return sorted((g for g in self.games if g.counter_pick), key=lambda g: g.slot_number)

    @property
    def owned_game_ids(self) -> set[str]:
        return {g.game_id for g in self.games if g.game_id is not None}

    # ------------------------------------------------------------------
    # Roster queries
    # ------------------------------------------------------------------

    def get_roster_entry(self, entry_id: str) -> Optional[RosterEntry]:
        return next((g for g in self.games if g.id == entry_id), None)

    def get_roster_entry_by_game_id(self, game_id: str) -> Optional[RosterEntry]:
        return next((g for g in self.games if g.game_id == game_id), None)

    def get_number_available_slots(
        self,
        counter_pick: bool,
        options: LeagueOptions,
        year_finished: bool = False,
    ) -> int:
        if year_finished:
            return 0
        total = options.counter_picks if counter_pick else options.standard_games
        used = sum(1 for g in self.games if g.counter_pick == counter_pick)
        return total - used

    def has_remaining_game_spot(self, standard_games: int) -> bool:
        return len(self.standard_games) < standard_games

    def next_slot_number(self, counter_pick: bool = False) -> int:
        """Lowest slot number not taken by an entry of the same kind."""
        taken = {g.slot_number for g in self.games if g.counter_pick == counter_pick}
        slot = 0
        while slot in taken:
            slot += 1
        return slot

    # ------------------------------------------------------------------
    # Drops
    # ------------------------------------------------------------------

    def _eligible_drop_counter(self, will_release: bool, options: LeagueOptions) -> Optional[str]:
        """Name of the counter a drop would consume, release category first."""
        if will_release:
            category = ("will_release_games_dropped", options.will_release_droppable_games)
        else:
            category = ("will_not_release_games_dropped", options.will_not_release_droppable_games)

        for counter, allowance in (category, ("free_games_dropped", options.free_droppable_games)):
            if LeagueOptions.allowance_open(allowance, getattr(self, counter)):
                return counter
        return None

    def can_drop_game(self, will_release: bool, options: LeagueOptions) -> Result:
        if self._eligible_drop_counter(will_release, options) is not None:
            return Result.success()
        if will_release:
            return Result.failure("Publisher cannot drop any more 'Will Release' games")
        return Result.failure("Publisher cannot drop any more 'Will Not Release' games")

    def drop_game(self, entry: RosterEntry, options: LeagueOptions) -> None:
        if self.get_roster_entry(entry.id) is None:
            raise ActionProcessingError(f"Cannot drop '{entry.game_name}': not on roster", self.id)

        counter = self._eligible_drop_counter(entry.will_release(self.year), options)
        if counter is None:
            raise ActionProcessingError(f"Cannot drop '{entry.game_name}': no drops remaining", self.id)

        setattr(self, counter, getattr(self, counter) + 1)
        self.games = [g for g in self.games if g.id != entry.id]

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def acquire_game(self, entry: RosterEntry, cost: int) -> None:
        """Add *entry* to the roster and debit *cost*.

        Space and eligibility are the caller's responsibility. A debit that
        would take the budget below zero is an internal error.
        """
        if cost > self.budget:
            raise ActionProcessingError(
                f"Cannot acquire '{entry.game_name}' for ${cost} with ${self.budget} remaining",
                self.id,
            )
        self.games = self.games + [entry]
        self.budget -= cost
