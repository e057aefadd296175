"""Plain-text rendering of a DashboardView for the terminal."""

from dashboard.database.models import UserMetadata
from dashboard.pipeline.counters import COUNTERS
from dashboard.pipeline.models import DashboardView, ImageSlot, SummaryStatistics, UserGroupView


def render_summary(summary: SummaryStatistics) -> list[str]:
    lines = [
        "Totals: "
        + ", ".join(f"{spec.label} {summary.totals.get(spec.key, 0)}" for spec in COUNTERS),
        f"Users: {summary.total_users} (anonymous {summary.anonymous_users}, "
        f"India {summary.india_users})",
    ]
    averaged = [spec for spec in COUNTERS if spec.averaged]
    lines.append(
        "Averages: "
        + ", ".join(f"{spec.label} {summary.averages.get(spec.key, 0.0):g}" for spec in averaged)
    )
    return lines


def render_metadata(metadata: UserMetadata) -> str:
    flags = [
        f"Anonymous {'Yes' if metadata.is_anonymous else 'No'}",
        f"India {'Yes' if metadata.is_india else 'No'}",
    ]
    counters = [f"{spec.label} {spec.extract(metadata)}" for spec in COUNTERS]
    return " | ".join(flags + counters)


def render_image(slot: ImageSlot) -> str:
    return f"{slot.label}: {slot.url}" if slot.url else slot.placeholder


def render_group(group: UserGroupView) -> list[str]:
    lines = [group.header]
    if group.metadata is not None:
        lines.append(f"  {render_metadata(group.metadata)}")
    for row in group.rows:
        number = f" #{row.position}" if row.position is not None else ""
        lines.append(f"  -{number} {row.timestamp}")
        lines.extend(f"    {line}" for line in row.task.splitlines())
        lines.extend(f"    {render_image(slot)}" for slot in row.images)
    return lines


def render_view(view: DashboardView) -> str:
    lines = render_summary(view.summary)
    if view.record_count == 0:
        lines.append("0")
        lines.append("No records found for the selected date range")
        return "\n".join(lines)

    lines.append(f"{view.record_count} records from {view.user_count} unique users")
    for group in view.groups:
        lines.append("")
        lines.extend(render_group(group))
    return "\n".join(lines)
