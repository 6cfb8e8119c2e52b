"""Default eligibility collaborator for claims and drops.

The settlement engine only needs yes/no-with-reasons answers from this
service. Catalog rules (tag bans, release windows) belong to the hosting
system; the defaults here enforce ownership, roster space and the
counter-pick drop block.
"""

from __future__ import annotations

from typing import Iterable

from ..models.actions import DropRequest, PickupBid
from ..models.game import CatalogEntry, RosterEntry
from ..models.league import LeagueYear
from ..models.publisher import Publisher
from ..models.results import ClaimResult, Result


class GameAcquisitionService:
    """Eligibility checks consulted during settlement.

    Subclass and override to plug in richer catalog rules.
    """

    def can_claim_game(
        self,
        publisher: Publisher,
        game: CatalogEntry,
        league_year: LeagueYear,
        publishers_in_league: Iterable[Publisher],
        allow_if_full: bool = False,
    ) -> ClaimResult:
        errors: list[str] = []

        if game.id in publisher.owned_game_ids:
            errors.append("Publisher already has that game.")
        elif any(
            entry.game_id == game.id and not entry.counter_pick
            for other in publishers_in_league
            if other.id != publisher.id
            for entry in other.games
        ):
            errors.append("Cannot claim a game that someone already has.")

        if not allow_if_full and not publisher.has_remaining_game_spot(league_year.options.standard_games):
            errors.append("User has no available spaces.")

        return ClaimResult(errors=errors)

    def can_conditionally_drop_game(
        self,
        bid: PickupBid,
        league_year: LeagueYear,
        publisher: Publisher,
        other_publishers: Iterable[Publisher],
    ) -> Result:
        if bid.conditional_drop_entry is None:
            return Result.failure("No conditional drop was requested.")
        # Pickups fill standard slots; dropping a counter pick frees none
        if bid.conditional_drop_entry.counter_pick:
            return Result.failure("Cannot conditionally drop a counter pick.")
        return self._check_drop(bid.conditional_drop_entry, league_year, publisher, other_publishers)

    def can_drop_game(
        self,
        drop_request: DropRequest,
        league_year: LeagueYear,
        publisher: Publisher,
        other_publishers: Iterable[Publisher],
    ) -> Result:
        return self._check_drop(drop_request.entry, league_year, publisher, other_publishers)

    def _check_drop(
        self,
        requested: RosterEntry,
        league_year: LeagueYear,
        publisher: Publisher,
        other_publishers: Iterable[Publisher],
    ) -> Result:
        # Use the publisher's current copy; the request may carry a stale one
        entry = publisher.get_roster_entry(requested.id)
        if entry is None:
            return Result.failure("Publisher does not have that game.")

        options = league_year.options
        if options.counter_picks_block_drops and not entry.counter_pick and entry.game_id is not None:
            counter_picked = any(
                other_entry.counter_pick and other_entry.game_id == entry.game_id
                for other in other_publishers
                for other_entry in other.games
            )
            if counter_picked:
                return Result.failure("You cannot drop that game because it was counter picked.")

        return publisher.can_drop_game(entry.will_release(league_year.year), options)
