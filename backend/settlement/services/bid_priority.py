"""Per-publisher bid priority ranks.

A publisher's pending bids are ranked 1..N with no gaps; rank 1 is the
bid the publisher most wants when several of its bids could win at once.
"""

from __future__ import annotations

from ..models.actions import PickupBid


def _group_by_publisher(bids: list[PickupBid]) -> dict[str, list[PickupBid]]:
    grouped: dict[str, list[PickupBid]] = {}
    for bid in bids:
        grouped.setdefault(bid.publisher_id, []).append(bid)
    return grouped


def validate_bid_priorities(bids: list[PickupBid]) -> None:
    """Raise ValueError unless every publisher's bids are ranked exactly 1..N."""
    for publisher_id, publisher_bids in _group_by_publisher(bids).items():
        ranks = sorted(b.priority for b in publisher_bids)
        expected = list(range(1, len(publisher_bids) + 1))
        if ranks != expected:
            raise ValueError(
                f"Bid priorities for publisher '{publisher_id}' must be {expected}, got {ranks}"
            )


def set_bid_priority_order(bids: list[PickupBid], ordered_bid_ids: list[str]) -> list[PickupBid]:
    """Re-rank one publisher's bids to follow *ordered_bid_ids* (first = rank 1).

    *bids* must be exactly that publisher's pending bids.
    """
    publisher_ids = {b.publisher_id for b in bids}
    if len(publisher_ids) > 1:
        raise ValueError("Bids from more than one publisher cannot be ordered together")

    by_id = {b.id: b for b in bids}
    if len(ordered_bid_ids) != len(set(ordered_bid_ids)) or set(ordered_bid_ids) != set(by_id):
        raise ValueError("Priority order must list each of the publisher's bids exactly once")

    ordered = [by_id[bid_id] for bid_id in ordered_bid_ids]
    for rank, bid in enumerate(ordered, start=1):
        bid.priority = rank
    return ordered


def remove_bid(bids: list[PickupBid], bid_id: str) -> list[PickupBid]:
    """Remove a bid and close the gap in its publisher's ranking."""
    removed = next((b for b in bids if b.id == bid_id), None)
    if removed is None:
        raise ValueError(f"Bid '{bid_id}' not found")

    remaining = [b for b in bids if b.id != bid_id]
    for bid in remaining:
        if bid.publisher_id == removed.publisher_id and bid.priority > removed.priority:
            bid.priority -= 1
    return remaining


def rerank_pending_bids(bids: list[PickupBid]) -> list[PickupBid]:
    """Compact each publisher's ranks to 1..N, keeping their relative order."""
    reranked: list[PickupBid] = []
    for publisher_bids in _group_by_publisher(bids).values():
        publisher_bids.sort(key=lambda b: (b.priority, b.timestamp))
        for rank, bid in enumerate(publisher_bids, start=1):
            bid.priority = rank
        reranked.extend(publisher_bids)
    return reranked
