"""Projected remaining-season points, used to break tied bids."""

from __future__ import annotations

from datetime import date
from typing import Callable

from ..models.game import RosterEntry
from ..models.league import LeagueYear, SystemWideValues
from ..models.publisher import Publisher

ProjectionFunction = Callable[[Publisher, LeagueYear, SystemWideValues, date], float]


def _entry_points(entry: RosterEntry, system_wide_values: SystemWideValues) -> float:
    """Real points when scored, else the catalog projection, else the league average."""
    if entry.fantasy_points is not None:
        points = entry.fantasy_points
    elif entry.game is not None and entry.game.projected_points is not None:
        points = entry.game.projected_points
    elif entry.counter_pick:
        return system_wide_values.average_counter_pick_points
    else:
        return system_wide_values.average_standard_game_points

    # Counter picks score against the owner
    return -points if entry.counter_pick else points


def get_projected_fantasy_points(
    publisher: Publisher,
    league_year: LeagueYear,
    system_wide_values: SystemWideValues,
    as_of: date,
) -> float:
    """Owned-entry points plus league averages for every empty slot.

    Empty slots contribute nothing once the year is over, either because
    the league-year is flagged finished or *as_of* is past it.
    """
    current = sum(_entry_points(g, system_wide_values) for g in publisher.games)

    finished = league_year.finished or as_of.year > league_year.year
    options = league_year.options
    empty_standard = max(0, publisher.get_number_available_slots(False, options, finished))
    empty_counter_picks = max(0, publisher.get_number_available_slots(True, options, finished))

    return (
        current
        + empty_standard * system_wide_values.average_standard_game_points
        + empty_counter_picks * system_wide_values.average_counter_pick_points
    )
