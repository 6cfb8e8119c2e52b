"""Settlement results and their merge operation."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable

from pydantic import BaseModel

from .actions import DropRequest, FailedDropRequest, FailedPickupBid, LeagueAction, PickupBid
from .game import RosterEntry, RemovedRosterEntry
from .publisher import Publisher


def _union(first: Iterable, second: Iterable, key: Callable) -> list:
    """Union keyed by *key*; order of first appearance, last write wins."""
    merged: dict = {}
    for item in first:
        merged[key(item)] = item
    for item in second:
        merged[key(item)] = item
    return list(merged.values())


class ActionProcessingResults(BaseModel):
    """Outcome of (part of) a settlement run.

    ``empty()`` is the identity and ``combine`` is associative, so phase and
    pass results can be folded in any grouping. Publisher snapshots are
    last-write-wins per publisher id.
    """

    success_bids: list[PickupBid] = []
    failed_bids: list[FailedPickupBid] = []
    success_drops: list[DropRequest] = []
    failed_drops: list[FailedDropRequest] = []
    league_actions: list[LeagueAction] = []
    updated_publishers: list[Publisher] = []
    added_games: list[RosterEntry] = []
    removed_games: list[RemovedRosterEntry] = []
    remaining_bids: list[PickupBid] = []

    @classmethod
    def empty(cls, publishers: Iterable[Publisher] = ()) -> ActionProcessingResults:
        return cls(updated_publishers=list(publishers))

    def combine(self, other: ActionProcessingResults) -> ActionProcessingResults:
        return ActionProcessingResults(
            success_bids=_union(self.success_bids, other.success_bids, lambda b: b.id),
            failed_bids=_union(self.failed_bids, other.failed_bids, lambda f: f.bid.id),
            success_drops=_union(self.success_drops, other.success_drops, lambda d: d.id),
            failed_drops=_union(self.failed_drops, other.failed_drops, lambda f: f.drop.id),
            league_actions=_union(self.league_actions, other.league_actions, lambda a: a.id),
            updated_publishers=_union(self.updated_publishers, other.updated_publishers, lambda p: p.id),
            added_games=_union(self.added_games, other.added_games, lambda g: g.id),
            removed_games=_union(self.removed_games, other.removed_games, lambda r: r.entry.id),
            remaining_bids=_union(self.remaining_bids, other.remaining_bids, lambda b: b.id),
        )

    @property
    def processed_bid_ids(self) -> set[str]:
        return {b.id for b in self.success_bids} | {f.bid.id for f in self.failed_bids}

    def get_publisher(self, publisher_id: str) -> Publisher | None:
        return next((p for p in self.updated_publishers if p.id == publisher_id), None)

    def failure_reason_for(self, bid_id: str) -> str | None:
        return next((f.failure_reason for f in self.failed_bids if f.bid.id == bid_id), None)


class LeagueActionProcessingSet(BaseModel):
    """The slice of a run's results belonging to one league-year."""
    league_id: str
    year: int
    success_bids: list[PickupBid] = []
    failed_bids: list[FailedPickupBid] = []
    success_drops: list[DropRequest] = []
    failed_drops: list[FailedDropRequest] = []
    league_actions: list[LeagueAction] = []


class FinalizedActionProcessingResults(BaseModel):
    process_set_id: str
    process_time: datetime
    process_name: str
    results: ActionProcessingResults

    def league_action_sets(self) -> list[LeagueActionProcessingSet]:
        r = self.results
        keys: dict[tuple[str, int], None] = {}
        for item in [*r.success_bids, *r.success_drops, *r.league_actions]:
            keys[(item.league_id, item.year)] = None
        for failed in r.failed_bids:
            keys[(failed.bid.league_id, failed.bid.year)] = None
        for failed in r.failed_drops:
            keys[(failed.drop.league_id, failed.drop.year)] = None

        return [
            LeagueActionProcessingSet(
                league_id=key[0],
                year=key[1],
                success_bids=[b for b in r.success_bids if b.league_year_key == key],
                failed_bids=[f for f in r.failed_bids if f.bid.league_year_key == key],
                success_drops=[d for d in r.success_drops if d.league_year_key == key],
                failed_drops=[f for f in r.failed_drops if f.drop.league_year_key == key],
                league_actions=[a for a in r.league_actions if (a.league_id, a.year) == key],
            )
            for key in keys
        ]
