import asyncio

from dashboard.database.models import ProcessedRecord
from dashboard.logging.logger import Log
from dashboard.pipeline.aggregator import aggregate
from dashboard.pipeline.models import SummaryStatistics
from dashboard.pipeline.segments import AnonymousSegment, IndiaSegment
from dashboard.pipeline.time_window import TimeWindow
from dashboard.store.base import BaseRecordStore


class RecordFetcher:
    """Loads the records and the metadata summary for one window."""

    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store

    async def fetch(
        self,
        window: TimeWindow,
        anonymous: AnonymousSegment,
        india: IndiaSegment,
    ) -> tuple[list[ProcessedRecord], SummaryStatistics]:
        """Run both queries concurrently.

        The first failure cancels the other query and is re-raised as is.

        Raises:
            FetchError: if either query fails.
        """
        try:
            async with asyncio.TaskGroup() as group:
                records_task = group.create_task(self._store.fetch_records(window))
                summary_task = group.create_task(
                    self.fetch_summary(window, anonymous, india)
                )
        except ExceptionGroup as failed:
            raise failed.exceptions[0]

        records = records_task.result()
        summary = summary_task.result()
        Log.info(
            f"Fetched {len(records)} records between {window.start_iso} and {window.end_iso}"
        )
        return records, summary

    async def fetch_summary(
        self,
        window: TimeWindow,
        anonymous: AnonymousSegment,
        india: IndiaSegment,
    ) -> SummaryStatistics:
        user_ids = await self._store.fetch_user_ids(window)
        if not user_ids:
            return SummaryStatistics.empty()
        metadata = await self._store.fetch_metadata(user_ids)
        Log.debug(f"Loaded metadata for {len(metadata)} of {len(user_ids)} users")
        return aggregate(metadata, anonymous, india)
