from datetime import tzinfo

from dashboard.database.models import ProcessedRecord
from dashboard.pipeline.grouper import NO_USER_KEY
from dashboard.pipeline.models import ImageSlot, PreviewSet, RecordRow, UserGroupView
from dashboard.pipeline.previews import PreviewResolver
from dashboard.pipeline.segments import MetadataLookup
from dashboard.pipeline.task_payload import extract_target_style_url, format_task
from dashboard.pipeline.time_window import format_timestamp


class ViewModelAssembler:
    """Builds the per-user row groups handed to a renderer."""

    def __init__(
        self,
        previews: PreviewResolver,
        lookup: MetadataLookup,
        tz: tzinfo | None,
    ) -> None:
        self._previews = previews
        self._lookup = lookup
        self._tz = tz

    async def assemble(
        self,
        user_keys: list[str],
        groups: dict[str, list[ProcessedRecord]],
    ) -> list[UserGroupView]:
        """One group view per key, in key order. Users are handled one at a time."""
        views: list[UserGroupView] = []
        for user_key in user_keys:
            records = groups[user_key]
            previews = await self._previews.resolve(user_key)
            metadata = await self._lookup.get(user_key)
            views.append(
                UserGroupView(
                    user_key=user_key,
                    display_key="N/A" if user_key == NO_USER_KEY else user_key,
                    record_count=len(records),
                    metadata=metadata,
                    previews=previews,
                    rows=self._rows(user_key, records, previews),
                )
            )
        return views

    def _rows(
        self,
        user_key: str,
        records: list[ProcessedRecord],
        previews: PreviewSet,
    ) -> list[RecordRow]:
        numbered = len(records) > 1
        return [
            RecordRow(
                user_key=user_key,
                position=index if numbered else None,
                timestamp=format_timestamp(record.created_at, self._tz),
                task=format_task(record.task),
                source=ImageSlot("Source", previews.source),
                profile=ImageSlot("Profile", previews.target),
                target_style=ImageSlot("Target Style", extract_target_style_url(record.task)),
                result=ImageSlot("Result URL", record.result_url),
            )
            for index, record in enumerate(records, start=1)
        ]
