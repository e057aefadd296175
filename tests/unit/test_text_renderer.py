from dashboard.database.models import UserMetadata
from dashboard.pipeline.models import (
    DashboardView,
    ImageSlot,
    PreviewSet,
    RecordRow,
    SummaryStatistics,
    UserGroupView,
)
from dashboard.render.text_renderer import render_image, render_metadata, render_view


def _make_row(position: int | None) -> RecordRow:
    return RecordRow(
        user_key="u1",
        position=position,
        timestamp="01/01/2024, 10:00:00 AM UTC",
        task='{\n  "style": "anime"\n}',
        source=ImageSlot("Source", "https://src"),
        profile=ImageSlot("Profile"),
        target_style=ImageSlot("Target Style"),
        result=ImageSlot("Result URL", "https://res"),
    )


class TestRenderView:
    def test_zero_records(self) -> None:
        text = render_view(
            DashboardView(summary=SummaryStatistics.empty(), record_count=0, user_count=0)
        )
        lines = text.splitlines()
        assert "Users: 0 (anonymous 0, India 0)" in lines
        assert "0" in lines
        assert "No records found for the selected date range" in lines

    def test_groups_and_rows(self) -> None:
        group = UserGroupView(
            user_key="u1",
            display_key="u1",
            record_count=2,
            metadata=UserMetadata(user_id="u1", is_india=True, total_likes=3),
            previews=PreviewSet(source="https://src"),
            rows=[_make_row(1), _make_row(2)],
        )
        view = DashboardView(
            summary=SummaryStatistics.empty(), record_count=2, user_count=1, groups=[group]
        )

        text = render_view(view)

        assert "2 records from 1 unique users" in text
        assert "User: u1 (2 records)" in text
        assert "#1 01/01/2024, 10:00:00 AM UTC" in text
        assert "No Profile" in text
        assert "Result URL: https://res" in text
        assert '"style": "anime"' in text


class TestRenderParts:
    def test_render_image(self) -> None:
        assert render_image(ImageSlot("Source")) == "No Source"
        assert render_image(ImageSlot("Source", "https://x")) == "Source: https://x"

    def test_render_metadata(self) -> None:
        text = render_metadata(UserMetadata(user_id="u1", is_anonymous=True, total_shares=2))
        assert text.startswith("Anonymous Yes | India No")
        assert "Shares 2" in text
        assert "Add Credits 0" in text
