"""The lifetime usage counters shown in the summary and in each user's strip.

Both displays read this single list so they cannot drift apart.
"""

from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter

from dashboard.database.models import UserMetadata


@dataclass(frozen=True)
class CounterSpec:
    key: str
    label: str
    extract: Callable[[UserMetadata], int]
    averaged: bool = True


COUNTERS: tuple[CounterSpec, ...] = (
    CounterSpec("transforms", "Transforms", attrgetter("total_transforms")),
    CounterSpec("shares", "Shares", attrgetter("total_shares")),
    CounterSpec("likes", "Likes", attrgetter("total_likes")),
    CounterSpec("dislikes", "Dislikes", attrgetter("total_dislikes")),
    CounterSpec(
        "buy_credits_calls",
        "Buy Credits",
        attrgetter("total_buy_credits_calls"),
        averaged=False,
    ),
    CounterSpec("source_uploads", "Source Uploads", attrgetter("total_source_uploads")),
    CounterSpec("add_credits_calls", "Add Credits", attrgetter("total_add_credits_calls")),
)
