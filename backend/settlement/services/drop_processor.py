"""Drop request settlement."""

from __future__ import annotations

import logging
from datetime import datetime

from ..exceptions import ActionProcessingError
from ..models.actions import DropRequest, FailedDropRequest, LeagueAction
from ..models.game import DROPPED_BY_PLAYER, RemovedRosterEntry
from ..models.league import LeagueYear
from ..models.processing import ActionProcessingResults
from ..models.publisher import Publisher
from .game_acquisition import GameAcquisitionService

logger = logging.getLogger(__name__)


def process_drops(
    drops_by_league_year: dict[tuple[str, int], list[DropRequest]],
    league_years: dict[tuple[str, int], LeagueYear],
    publishers: list[Publisher],
    acquisition_service: GameAcquisitionService,
    process_time: datetime,
) -> ActionProcessingResults:
    """Apply every drop request against *publishers* (mutated in place).

    Requests are independent: each one reads and writes only its own
    publisher, so order does not affect the outcome.
    """
    publisher_lookup = {p.id: p for p in publishers}
    success_drops: list[DropRequest] = []
    failed_drops: list[FailedDropRequest] = []
    removed_games: list[RemovedRosterEntry] = []
    league_actions: list[LeagueAction] = []

    for key, drop_requests in drops_by_league_year.items():
        league_year = league_years[key]
        for drop_request in drop_requests:
            publisher = publisher_lookup.get(drop_request.publisher_id)
            if publisher is None:
                raise ActionProcessingError("Drop request for unknown publisher", drop_request.publisher_id)

            others = [p for p in publishers if p.league_year_key == key and p.id != publisher.id]
            drop_result = acquisition_service.can_drop_game(drop_request, league_year, publisher, others)
            if drop_result.is_failure:
                drop_request.successful = False
                failed = FailedDropRequest(drop=drop_request, failure_reason=drop_result.error)
                failed_drops.append(failed)
                league_actions.append(LeagueAction.for_failed_drop(failed, process_time))
                continue

            entry = publisher.get_roster_entry(drop_request.entry.id) or drop_request.entry
            publisher.drop_game(entry, league_year.options)
            drop_request.successful = True
            success_drops.append(drop_request)
            removed_games.append(RemovedRosterEntry(
                entry=entry, removal_reason=DROPPED_BY_PLAYER, removed_at=process_time,
            ))
            league_actions.append(LeagueAction.for_successful_drop(drop_request, process_time))

        logger.debug(f"Processed {len(drop_requests)} drop request(s) for {league_year}")

    return ActionProcessingResults(
        success_drops=success_drops,
        failed_drops=failed_drops,
        league_actions=league_actions,
        updated_publishers=[p.model_copy(deep=True) for p in publishers],
        removed_games=removed_games,
    )
