"""Integration tests: settle a league through the admin API."""
from __future__ import annotations

import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from settlement.main import app

client = TestClient(app)


def _game(game_id: str, release_date: str = "2022-06-01") -> dict:
    return {"id": game_id, "name": f"Game {game_id}", "release_date": release_date}


def _publisher(publisher_id: str, budget: int = 100, games: tuple = (), draft_position: int = 1) -> dict:
    return {
        "id": publisher_id,
        "league_id": "league_1",
        "year": 2022,
        "name": f"Publisher {publisher_id}",
        "draft_position": draft_position,
        "budget": budget,
        "games": [
            {
                "id": f"{publisher_id}_{game_id}",
                "publisher_id": publisher_id,
                "game_name": f"Game {game_id}",
                "game": _game(game_id),
                "slot_number": slot,
            }
            for slot, game_id in enumerate(games)
        ],
    }


def _bid(bid_id: str, publisher_id: str, game_id: str, amount: int, priority: int = 1, **extra) -> dict:
    return {
        "id": bid_id,
        "publisher_id": publisher_id,
        "league_id": "league_1",
        "year": 2022,
        "game": _game(game_id),
        "bid_amount": amount,
        "priority": priority,
        "timestamp": "2022-03-01T12:00:00",
        **extra,
    }


@pytest.fixture
def payload():
    a = _publisher("A", games=("a", "b", "c"))
    b = _publisher("B", draft_position=2)
    return {
        "league_years": [{
            "league_id": "league_1",
            "year": 2022,
            "league_name": "Test League",
            "options": {"standard_games": 3, "counter_picks": 1, "minimum_bid_amount": 1},
        }],
        "publishers": [a, b],
        "bids": [
            _bid("ba", "A", "G", 20, conditional_drop_entry=a["games"][0]),
            _bid("bb", "B", "G", 15),
            _bid("bb2", "B", "H", 0, priority=2),
        ],
        "drops": [],
        "process_name": "Weekly Processing",
        "process_time": "2022-03-06T20:00:00",
    }


class TestActionsApi:
    def test_health(self):
        resp = client.get("/api/health")
        assert resp.json() == {"status": "ok"}

    def test_process(self, payload):
        resp = client.post("/api/actions/process", json=payload)
        assert resp.status_code == 200
        data = resp.json()

        assert data["process_name"] == "Weekly Processing"
        results = data["results"]
        assert [b["id"] for b in results["success_bids"]] == ["ba"]
        failures = {f["bid"]["id"]: f["failure_reason"] for f in results["failed_bids"]}
        assert failures == {
            "bb": "Publisher was outbid.",
            "bb2": "Bid is below the minimum bid amount.",
        }

        publishers = {p["id"]: p for p in results["updated_publishers"]}
        assert publishers["A"]["budget"] == 80
        assert sorted(g["game"]["id"] for g in publishers["A"]["games"]) == ["G", "b", "c"]
        assert [r["removal_reason"] for r in results["removed_games"]] == ["Conditionally dropped by player"]
        assert len(data["league_action_sets"]) == 1

    def test_process_drop(self, payload):
        payload["bids"] = []
        payload["drops"] = [{
            "id": "d1",
            "publisher_id": "A",
            "league_id": "league_1",
            "year": 2022,
            "entry": payload["publishers"][0]["games"][1],
        }]
        resp = client.post("/api/actions/process", json=payload)
        assert resp.status_code == 200
        results = resp.json()["results"]
        assert [d["id"] for d in results["success_drops"]] == ["d1"]

    def test_unknown_league_year(self, payload):
        payload["league_years"] = []
        resp = client.post("/api/actions/process", json=payload)
        assert resp.status_code == 400

    def test_export_csv(self, payload):
        resp = client.post("/api/actions/export", json=payload, params={"format": "csv"})
        assert resp.status_code == 200
        assert "text/csv" in resp.headers["content-type"]

        df = pd.read_csv(io.StringIO(resp.text))
        assert list(df.columns) == ["League", "Year", "Publisher", "Timestamp", "Action Type", "Description"]
        # conditional drop + win + two failures
        assert len(df) == 4
        assert "Acquired 'Game G' with a bid of $20" in set(df["Description"])
