"""Settlement run orchestration: drops first, then bid passes to a fixpoint."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from ..config import ProcessingConfig, processing_config
from ..models.actions import DropRequest, PickupBid, ProcessedBidSet
from ..models.league import LeagueYear, SystemWideValues
from ..models.processing import ActionProcessingResults, FinalizedActionProcessingResults
from ..models.publisher import Publisher
from .bid_priority import rerank_pending_bids, validate_bid_priorities
from .bid_processor import apply_bid_results, process_pickups_for_league_year
from .drop_processor import process_drops
from .game_acquisition import GameAcquisitionService
from .projections import ProjectionFunction, get_projected_fantasy_points

logger = logging.getLogger(__name__)


def group_by_league_year(actions: list) -> dict[tuple[str, int], list]:
    grouped: dict[tuple[str, int], list] = {}
    for action in actions:
        grouped.setdefault(action.league_year_key, []).append(action)
    return grouped


def _league_year_lookup(
    league_years: list[LeagueYear],
    bids: list[PickupBid],
    drops: list[DropRequest],
) -> dict[tuple[str, int], LeagueYear]:
    lookup = {ly.key: ly for ly in league_years}
    for action in [*bids, *drops]:
        if action.league_year_key not in lookup:
            league_id, year = action.league_year_key
            raise ValueError(f"League year '{league_id}' ({year}) not provided")
    return lookup


def _process_pickups_iteration(
    bids: list[PickupBid],
    league_years: dict[tuple[str, int], LeagueYear],
    publishers: list[Publisher],
    system_wide_values: SystemWideValues,
    acquisition_service: GameAcquisitionService,
    projection_fn: ProjectionFunction,
    process_time: datetime,
) -> ActionProcessingResults:
    """One bid pass over every league-year, against the same publisher snapshots."""
    processed = ProcessedBidSet()
    for key, league_year_bids in group_by_league_year(bids).items():
        processed = processed.append_set(process_pickups_for_league_year(
            league_years[key],
            league_year_bids,
            publishers,
            system_wide_values,
            acquisition_service,
            projection_fn,
            process_time.date(),
        ))
    return apply_bid_results(processed, league_years, publishers, process_time)


def process_actions(
    league_years: list[LeagueYear],
    publishers: list[Publisher],
    bids: list[PickupBid],
    drops: list[DropRequest],
    system_wide_values: Optional[SystemWideValues] = None,
    acquisition_service: Optional[GameAcquisitionService] = None,
    projection_fn: ProjectionFunction = get_projected_fantasy_points,
    process_time: Optional[datetime] = None,
    config: ProcessingConfig = processing_config,
) -> ActionProcessingResults:
    """Settle every pending drop and bid.

    Inputs are not modified; the run works on copies. The caller persists
    the returned results atomically.

    1. Nothing pending -> empty results over the unmodified publishers
    2. All drop requests, across every league-year
    3. A bid pass per league-year against the post-drop state
    4. Repeat bid passes on still-pending bids until none remain, a pass
       resolves nothing, or the iteration bound is reached
    """
    system_wide_values = system_wide_values or config.system_wide_values
    acquisition_service = acquisition_service or GameAcquisitionService()
    process_time = process_time or config.now()

    working_publishers = [p.model_copy(deep=True) for p in publishers]
    if not bids and not drops:
        return ActionProcessingResults.empty(working_publishers)

    working_bids = [b.model_copy(deep=True) for b in bids]
    working_drops = [d.model_copy(deep=True) for d in drops]
    lookup = _league_year_lookup(league_years, working_bids, working_drops)

    try:
        validate_bid_priorities(working_bids)
    except ValueError as exc:
        logger.warning(f"Re-ranking bids before processing: {exc}")
        working_bids = rerank_pending_bids(working_bids)

    logger.info(
        f"Processing {len(working_drops)} drop(s) and {len(working_bids)} bid(s) "
        f"across {len(lookup)} league year(s)"
    )

    results = process_drops(
        group_by_league_year(working_drops), lookup, working_publishers, acquisition_service, process_time
    )
    if not working_bids:
        return results

    max_iterations = config.max_iterations or len(working_bids)
    pending = working_bids
    iterations = 0
    while pending and iterations < max_iterations:
        iterations += 1
        pass_results = _process_pickups_iteration(
            pending, lookup, working_publishers, system_wide_values,
            acquisition_service, projection_fn, process_time,
        )
        results = results.combine(pass_results)

        processed_ids = pass_results.processed_bid_ids
        still_pending = [b for b in pending if b.id not in processed_ids]
        if len(still_pending) == len(pending):
            logger.warning(f"Bid pass {iterations} resolved nothing; {len(pending)} bid(s) left pending")
            break
        pending = still_pending

    if pending:
        if iterations >= max_iterations:
            logger.warning(f"Stopped after {iterations} bid pass(es) with {len(pending)} bid(s) pending")
        results = results.combine(ActionProcessingResults(remaining_bids=rerank_pending_bids(pending)))

    logger.info(
        f"Processed in {iterations} bid pass(es): {len(results.success_bids)} bid(s) won, "
        f"{len(results.failed_bids)} failed, {len(results.success_drops)} drop(s) succeeded, "
        f"{len(results.failed_drops)} failed"
    )
    return results


def finalize_action_processing(
    results: ActionProcessingResults,
    process_time: datetime,
    process_name: Optional[str] = None,
    config: ProcessingConfig = processing_config,
) -> FinalizedActionProcessingResults:
    """Stamp a run's results with a process-set id for persistence and notifications."""
    return FinalizedActionProcessingResults(
        process_set_id=str(uuid.uuid4()),
        process_time=process_time,
        process_name=process_name or config.default_process_name,
        results=results,
    )
