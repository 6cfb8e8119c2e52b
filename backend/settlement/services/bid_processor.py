"""Sealed-bid pickup settlement for a single league-year."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..exceptions import ActionProcessingError
from ..models.actions import FailedPickupBid, LeagueAction, PickupBid, ProcessedBidSet
from ..models.game import CONDITIONALLY_DROPPED_BY_PLAYER, RemovedRosterEntry, RosterEntry
from ..models.league import LeagueYear, SystemWideValues
from ..models.processing import ActionProcessingResults
from ..models.publisher import Publisher
from .game_acquisition import GameAcquisitionService
from .projections import ProjectionFunction

logger = logging.getLogger(__name__)

NO_SPACE = "No roster spots available."
INELIGIBLE = "Game is no longer eligible: "
INSUFFICIENT_FUNDS = "Not enough budget."
BELOW_MINIMUM = "Bid is below the minimum bid amount."
OUTBID = "Publisher was outbid."


def _lookup(publisher_lookup: dict[str, Publisher], publisher_id: str) -> Publisher:
    publisher = publisher_lookup.get(publisher_id)
    if publisher is None:
        raise ActionProcessingError("Bid for unknown publisher", publisher_id)
    return publisher


def _no_space_reason(bid: PickupBid) -> str:
    result = bid.conditional_drop_result
    if bid.conditional_drop_entry is not None and result is not None and result.is_failure:
        return (
            f"{NO_SPACE} Attempted to conditionally drop game: "
            f"{bid.conditional_drop_entry.game_name} but failed because: {result.error}"
        )
    return NO_SPACE


def validate_bid(
    bid: PickupBid,
    publisher: Publisher,
    league_year: LeagueYear,
    publishers_in_league: list[Publisher],
    acquisition_service: GameAcquisitionService,
) -> Optional[str]:
    """Return why *bid* cannot be considered this pass, or None if it is valid.

    The conditional drop verdict is computed first and cached on the bid so
    the claim check can allow a full roster. Nothing else is mutated.
    """
    others = [p for p in publishers_in_league if p.id != publisher.id]

    bid.conditional_drop_result = None
    if bid.conditional_drop_entry is not None:
        bid.conditional_drop_result = acquisition_service.can_conditionally_drop_game(
            bid, league_year, publisher, others
        )
    has_valid_conditional_drop = bid.has_valid_conditional_drop

    claim_result = acquisition_service.can_claim_game(
        publisher, bid.game, league_year, publishers_in_league, allow_if_full=has_valid_conditional_drop
    )

    options = league_year.options
    if bid.bid_amount < options.minimum_bid_amount:
        return BELOW_MINIMUM
    if not publisher.has_remaining_game_spot(options.standard_games) and not has_valid_conditional_drop:
        return _no_space_reason(bid)
    if not claim_result.success:
        return INELIGIBLE + claim_result.describe()
    if bid.bid_amount > publisher.budget:
        return INSUFFICIENT_FUNDS
    return None


def get_winnable_bids(
    valid_bids: list[PickupBid],
    league_year: LeagueYear,
    publisher_lookup: dict[str, Publisher],
    system_wide_values: SystemWideValues,
    projection_fn: ProjectionFunction,
    as_of: date,
) -> list[PickupBid]:
    """Pick the single best bid for every game that has valid bids.

    Ties on amount go to the lowest projected points, then the earliest
    bid, then the highest draft position.
    """
    affordable = [b for b in valid_bids if b.bid_amount <= _lookup(publisher_lookup, b.publisher_id).budget]

    by_game: dict[str, list[PickupBid]] = {}
    for bid in affordable:
        by_game.setdefault(bid.game.id, []).append(bid)

    winnable: list[PickupBid] = []
    for bids in by_game.values():
        if len(bids) == 1:
            winnable.append(bids[0])
            continue

        top_amount = max(b.bid_amount for b in bids)
        best = [b for b in bids if b.bid_amount == top_amount]

        projected = {
            b.id: projection_fn(publisher_lookup[b.publisher_id], league_year, system_wide_values, as_of)
            for b in best
        }
        lowest = min(projected.values())
        best = [b for b in best if projected[b.id] == lowest]

        best.sort(key=lambda b: (b.timestamp, -publisher_lookup[b.publisher_id].draft_position))
        winnable.append(best[0])

    return winnable


def get_winning_bids(winnable_bids: list[PickupBid]) -> list[PickupBid]:
    """A publisher wins at most one game per pass: its lowest-priority-rank winnable bid."""
    by_publisher: dict[str, PickupBid] = {}
    for bid in winnable_bids:
        current = by_publisher.get(bid.publisher_id)
        if current is None or bid.priority < current.priority:
            by_publisher[bid.publisher_id] = bid
    return list(by_publisher.values())


def process_pickups_for_league_year(
    league_year: LeagueYear,
    bids: list[PickupBid],
    publishers: list[Publisher],
    system_wide_values: SystemWideValues,
    acquisition_service: GameAcquisitionService,
    projection_fn: ProjectionFunction,
    as_of: date,
) -> ProcessedBidSet:
    """Decide winners and terminal failures for one league-year's bids.

    Bids on games nobody won this pass are in neither list and stay pending.
    """
    publisher_lookup = {p.id: p for p in publishers}
    publishers_in_league = [p for p in publishers if p.league_year_key == league_year.key]

    failed: list[FailedPickupBid] = []
    valid_bids: list[PickupBid] = []
    for bid in bids:
        publisher = _lookup(publisher_lookup, bid.publisher_id)
        reason = validate_bid(bid, publisher, league_year, publishers_in_league, acquisition_service)
        if reason is None:
            valid_bids.append(bid)
        else:
            failed.append(FailedPickupBid(bid=bid, failure_reason=reason))

    winnable = get_winnable_bids(
        valid_bids, league_year, publisher_lookup, system_wide_values, projection_fn, as_of
    )
    winning = get_winning_bids(winnable)

    winning_ids = {b.id for b in winning}
    taken_game_ids = {b.game.id for b in winning}
    for bid in valid_bids:
        if bid.id not in winning_ids and bid.game.id in taken_game_ids:
            failed.append(FailedPickupBid(bid=bid, failure_reason=OUTBID))

    logger.debug(
        f"{league_year}: {len(bids)} bid(s), {len(valid_bids)} valid, "
        f"{len(winning)} won, {len(failed)} failed"
    )
    return ProcessedBidSet(success_bids=winning, failed_bids=failed)


def apply_bid_results(
    processed: ProcessedBidSet,
    league_years: dict[tuple[str, int], LeagueYear],
    publishers: list[Publisher],
    process_time: datetime,
) -> ActionProcessingResults:
    """Apply winning bids to *publishers* (mutated in place) and build the pass result.

    A validated conditional drop is applied together with its winning bid,
    which is what lets a full roster take on a new game.
    """
    publisher_lookup = {p.id: p for p in publishers}
    added_games: list[RosterEntry] = []
    removed_games: list[RemovedRosterEntry] = []
    league_actions: list[LeagueAction] = []

    for bid in processed.success_bids:
        publisher = _lookup(publisher_lookup, bid.publisher_id)
        options = league_years[bid.league_year_key].options

        if bid.has_valid_conditional_drop:
            dropped = publisher.get_roster_entry(bid.conditional_drop_entry.id) or bid.conditional_drop_entry
            publisher.drop_game(dropped, options)
            removed_games.append(RemovedRosterEntry(
                entry=dropped, removal_reason=CONDITIONALLY_DROPPED_BY_PLAYER, removed_at=process_time,
            ))
            league_actions.append(LeagueAction.for_conditional_drop(bid, process_time))

        new_entry = RosterEntry(
            publisher_id=publisher.id,
            game_name=bid.game.name,
            game=bid.game,
            timestamp=process_time,
            counter_pick=False,
            slot_number=publisher.next_slot_number(counter_pick=False),
        )
        publisher.acquire_game(new_entry, bid.bid_amount)
        bid.successful = True
        added_games.append(new_entry)
        league_actions.append(LeagueAction.for_successful_bid(bid, process_time))

    for failed in processed.failed_bids:
        failed.bid.successful = False
        league_actions.append(LeagueAction.for_failed_bid(failed, process_time))

    return ActionProcessingResults(
        success_bids=processed.success_bids,
        failed_bids=processed.failed_bids,
        league_actions=league_actions,
        updated_publishers=[p.model_copy(deep=True) for p in publishers],
        added_games=added_games,
        removed_games=removed_games,
    )
