"""Shared builders for settlement tests."""
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from settlement.models.actions import DropRequest, PickupBid
from settlement.models.game import CatalogEntry, RosterEntry
from settlement.models.league import LeagueOptions, LeagueYear, SystemWideValues
from settlement.models.publisher import Publisher

LEAGUE_ID = "league_1"
YEAR = 2022
PROCESS_TIME = datetime(2022, 3, 6, 20, 0)
BID_TIME = datetime(2022, 3, 1, 12, 0)


@pytest.fixture
def options():
    return LeagueOptions(
        standard_games=3,
        counter_picks=1,
        minimum_bid_amount=0,
        free_droppable_games=1,
        will_release_droppable_games=1,
        will_not_release_droppable_games=1,
    )


@pytest.fixture
def league_year(options):
    return LeagueYear(league_id=LEAGUE_ID, year=YEAR, league_name="Test League", options=options)


@pytest.fixture
def system_wide_values():
    return SystemWideValues(average_standard_game_points=20.0, average_counter_pick_points=-5.0)


@pytest.fixture
def make_game():
    def _make(game_id: str, released: bool = True, projected_points=None) -> CatalogEntry:
        return CatalogEntry(
            id=game_id,
            name=f"Game {game_id}",
            release_date=date(YEAR, 6, 1) if released else None,
            minimum_release_date=None if released else date(YEAR + 2, 1, 1),
            projected_points=projected_points,
        )
    return _make


@pytest.fixture
def make_publisher(make_game):
    def _make(
        publisher_id: str,
        budget: int = 100,
        games: tuple = (),
        draft_position: int = 1,
        league_id: str = LEAGUE_ID,
        **counters,
    ) -> Publisher:
        publisher = Publisher(
            id=publisher_id,
            league_id=league_id,
            year=YEAR,
            user_id=f"user_{publisher_id}",
            name=f"Publisher {publisher_id}",
            draft_position=draft_position,
            budget=budget,
            **counters,
        )
        publisher.games = [
            RosterEntry(
                id=f"{publisher_id}_{game_id}",
                publisher_id=publisher_id,
                game_name=f"Game {game_id}",
                game=make_game(game_id, released=released),
                slot_number=slot,
            )
            for slot, (game_id, released) in enumerate(
                g if isinstance(g, tuple) else (g, True) for g in games
            )
        ]
        return publisher
    return _make


@pytest.fixture
def make_bid(make_game):
    def _make(
        bid_id: str,
        publisher: Publisher,
        game_id: str,
        amount: int,
        priority: int = 1,
        conditional_drop=None,
        minutes: int = 0,
    ) -> PickupBid:
        return PickupBid(
            id=bid_id,
            publisher_id=publisher.id,
            league_id=publisher.league_id,
            year=publisher.year,
            game=make_game(game_id),
            bid_amount=amount,
            priority=priority,
            timestamp=BID_TIME + timedelta(minutes=minutes),
            conditional_drop_entry=conditional_drop,
        )
    return _make


@pytest.fixture
def make_drop():
    def _make(drop_id: str, publisher: Publisher, entry: RosterEntry) -> DropRequest:
        return DropRequest(
            id=drop_id,
            publisher_id=publisher.id,
            league_id=publisher.league_id,
            year=publisher.year,
            entry=entry,
            timestamp=BID_TIME,
        )
    return _make
