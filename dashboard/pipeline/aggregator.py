import math

from dashboard.database.models import UserMetadata
from dashboard.pipeline.counters import COUNTERS, CounterSpec
from dashboard.pipeline.models import SummaryStatistics
from dashboard.pipeline.segments import AnonymousSegment, IndiaSegment, matches_segments


def average(total: int, count: int) -> float:
    """Per-user average rounded half-up to two decimals; 0 for an empty set."""
    if count == 0:
        return 0.0
    return math.floor(total / count * 100 + 0.5) / 100


def aggregate(
    rows: list[UserMetadata],
    anonymous: AnonymousSegment = AnonymousSegment.ALL,
    india: IndiaSegment = IndiaSegment.ALL,
    counters: tuple[CounterSpec, ...] = COUNTERS,
) -> SummaryStatistics:
    """Summarize the metadata rows that pass both segment selectors."""
    selected = [row for row in rows if matches_segments(row, anonymous, india)]
    count = len(selected)
    totals = {spec.key: sum(spec.extract(row) for row in selected) for spec in counters}
    return SummaryStatistics(
        total_users=count,
        anonymous_users=sum(1 for row in selected if row.is_anonymous),
        india_users=sum(1 for row in selected if row.is_india),
        totals=totals,
        averages={
            spec.key: average(totals[spec.key], count) for spec in counters if spec.averaged
        },
    )
