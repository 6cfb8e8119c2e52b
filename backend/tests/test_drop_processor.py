"""Tests for drop request settlement."""
from __future__ import annotations

from datetime import datetime

from settlement.models.actions import DROP_FAILED, DROP_SUCCESSFUL
from settlement.models.game import DROPPED_BY_PLAYER, RosterEntry
from settlement.models.league import LeagueOptions, LeagueYear
from settlement.services.drop_processor import process_drops
from settlement.services.game_acquisition import GameAcquisitionService

LEAGUE_ID = "league_1"
YEAR = 2022
PROCESS_TIME = datetime(2022, 3, 6, 20, 0)


def _run(drops, league_year, publishers):
    key = league_year.key
    return process_drops({key: drops}, {key: league_year}, publishers, GameAcquisitionService(), PROCESS_TIME)


class TestProcessDrops:
    def test_successful_drop(self, make_publisher, make_drop, league_year):
        publisher = make_publisher("A", games=("a", "b"))
        drop = make_drop("d1", publisher, publisher.get_roster_entry("A_a"))

        results = _run([drop], league_year, [publisher])

        assert [d.id for d in results.success_drops] == ["d1"]
        assert results.failed_drops == []
        assert publisher.get_roster_entry("A_a") is None
        assert publisher.will_release_games_dropped == 1
        assert results.removed_games[0].removal_reason == DROPPED_BY_PLAYER
        assert results.league_actions[0].action_type == DROP_SUCCESSFUL
        assert results.league_actions[0].description == "Dropped game: 'Game a'"
        snapshot = results.get_publisher("A")
        assert [g.id for g in snapshot.games] == ["A_b"]

    def test_quota_exhausted(self, make_publisher, make_drop):
        options = LeagueOptions(free_droppable_games=1, will_not_release_droppable_games=0)
        league_year = LeagueYear(league_id=LEAGUE_ID, year=YEAR, options=options)
        publisher = make_publisher("A", games=(("c", False),), free_games_dropped=1)
        drop = make_drop("d1", publisher, publisher.get_roster_entry("A_c"))

        results = _run([drop], league_year, [publisher])

        assert results.success_drops == []
        failed = results.failed_drops[0]
        assert failed.failure_reason == "Publisher cannot drop any more 'Will Not Release' games"
        assert failed.drop.successful is False
        assert len(publisher.games) == 1
        assert publisher.free_games_dropped == 1
        assert results.league_actions[0].action_type == DROP_FAILED

    def test_missing_entry_fails_without_mutation(self, make_publisher, make_drop, league_year):
        publisher = make_publisher("A", games=("a",))
        ghost = RosterEntry(id="A_zz", publisher_id="A", game_name="Gone")
        results = _run([make_drop("d1", publisher, ghost)], league_year, [publisher])

        assert results.failed_drops[0].failure_reason == "Publisher does not have that game."
        assert len(publisher.games) == 1
        assert publisher.will_release_games_dropped == 0
        assert publisher.free_games_dropped == 0

    def test_duplicate_drop_only_succeeds_once(self, make_publisher, make_drop, league_year):
        publisher = make_publisher("A", games=("a",))
        entry = publisher.get_roster_entry("A_a")
        results = _run([make_drop("d1", publisher, entry), make_drop("d2", publisher, entry)], league_year, [publisher])

        assert [d.id for d in results.success_drops] == ["d1"]
        assert [f.drop.id for f in results.failed_drops] == ["d2"]
        assert publisher.will_release_games_dropped == 1

    def test_drops_are_independent_across_publishers(self, make_publisher, make_drop, league_year):
        a = make_publisher("A", games=("a",))
        b = make_publisher("B", games=("b",), will_release_games_dropped=1, free_games_dropped=1)
        drops = [
            make_drop("d1", a, a.get_roster_entry("A_a")),
            make_drop("d2", b, b.get_roster_entry("B_b")),
        ]
        forward = _run(drops, league_year, [a, b])

        a2 = make_publisher("A", games=("a",))
        b2 = make_publisher("B", games=("b",), will_release_games_dropped=1, free_games_dropped=1)
        reverse_drops = [
            make_drop("d2", b2, b2.get_roster_entry("B_b")),
            make_drop("d1", a2, a2.get_roster_entry("A_a")),
        ]
        reverse = _run(reverse_drops, league_year, [a2, b2])

        assert {d.id for d in forward.success_drops} == {d.id for d in reverse.success_drops} == {"d1"}
        assert {f.drop.id for f in forward.failed_drops} == {f.drop.id for f in reverse.failed_drops} == {"d2"}

    def test_counter_pick_blocks_drop(self, make_publisher, make_drop):
        options = LeagueOptions(counter_picks_block_drops=True)
        league_year = LeagueYear(league_id=LEAGUE_ID, year=YEAR, options=options)
        owner = make_publisher("A", games=("a",))
        rival = make_publisher("B", games=("a",))
        rival.get_roster_entry("B_a").counter_pick = True

        results = _run([make_drop("d1", owner, owner.get_roster_entry("A_a"))], league_year, [owner, rival])

        assert results.failed_drops[0].failure_reason == "You cannot drop that game because it was counter picked."
        assert len(owner.games) == 1
