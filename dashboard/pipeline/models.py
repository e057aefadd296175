from dataclasses import dataclass, field

from dashboard.database.models import UserMetadata
from dashboard.pipeline.counters import COUNTERS


@dataclass(frozen=True)
class SummaryStatistics:
    """Counts and counter sums over the segment-filtered metadata set."""

    total_users: int = 0
    anonymous_users: int = 0
    india_users: int = 0
    totals: dict[str, int] = field(default_factory=dict)
    averages: dict[str, float] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "SummaryStatistics":
        return cls(
            totals={spec.key: 0 for spec in COUNTERS},
            averages={spec.key: 0.0 for spec in COUNTERS if spec.averaged},
        )


@dataclass(frozen=True)
class PreviewSet:
    """Latest signed image URL per storage role. Any may be missing."""

    source: str | None = None
    result: str | None = None
    target: str | None = None


@dataclass(frozen=True)
class ImageSlot:
    label: str
    url: str | None = None

    @property
    def placeholder(self) -> str:
        return f"No {self.label}"


@dataclass(frozen=True)
class RecordRow:
    """One processed record as displayed."""

    user_key: str
    position: int | None
    timestamp: str
    task: str
    source: ImageSlot
    profile: ImageSlot
    target_style: ImageSlot
    result: ImageSlot

    @property
    def images(self) -> tuple[ImageSlot, ...]:
        return (self.source, self.profile, self.target_style, self.result)


@dataclass(frozen=True)
class UserGroupView:
    user_key: str
    display_key: str
    record_count: int
    metadata: UserMetadata | None
    previews: PreviewSet
    rows: list[RecordRow] = field(default_factory=list)

    @property
    def header(self) -> str:
        noun = "record" if self.record_count == 1 else "records"
        return f"User: {self.display_key} ({self.record_count} {noun})"


@dataclass(frozen=True)
class DashboardView:
    summary: SummaryStatistics
    record_count: int
    user_count: int
    groups: list[UserGroupView] = field(default_factory=list)
