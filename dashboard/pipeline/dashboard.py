from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import tzinfo

import httpx

from dashboard.config.settings import Settings
from dashboard.database.connection import close_pool, init_pool
from dashboard.logging.logger import Log
from dashboard.pipeline.assembler import ViewModelAssembler
from dashboard.pipeline.exceptions import ValidationError
from dashboard.pipeline.fetcher import RecordFetcher
from dashboard.pipeline.grouper import group_by_user
from dashboard.pipeline.models import DashboardView
from dashboard.pipeline.previews import PreviewResolver
from dashboard.pipeline.segments import (
    AnonymousSegment,
    IndiaSegment,
    MetadataLookup,
    SegmentFilter,
)
from dashboard.pipeline.time_window import normalize_window, resolve_timezone
from dashboard.store.base import BaseRecordStore
from dashboard.store.factory import RecordStoreFactory
from dashboard.store.object_storage import ObjectStorageClient


@dataclass(frozen=True)
class DashboardQuery:
    start: str
    end: str
    anonymous: AnonymousSegment = AnonymousSegment.ALL
    india: IndiaSegment = IndiaSegment.ALL


class Dashboard:
    """Runs one filter operation end to end.

    Pipeline: normalize window -> fetch (records + summary) -> group ->
    segment filter -> resolve previews -> assemble.
    """

    def __init__(
        self,
        store: BaseRecordStore,
        storage: ObjectStorageClient,
        tz: tzinfo | None,
        *,
        preview_list_limit: int = 100,
        signed_url_ttl_seconds: int = 3600,
    ) -> None:
        self._store = store
        self._storage = storage
        self._tz = tz
        self._preview_list_limit = preview_list_limit
        self._signed_url_ttl_seconds = signed_url_ttl_seconds

    async def filter(self, query: DashboardQuery) -> DashboardView:
        """Build the view for the query.

        Raises:
            ValidationError: on a bad window; nothing is fetched.
            FetchError: if either top-level query fails; nothing is shown.
        """
        window = normalize_window(query.start, query.end, self._tz)
        records, summary = await RecordFetcher(self._store).fetch(
            window, query.anonymous, query.india
        )
        if not records:
            return DashboardView(summary=summary, record_count=0, user_count=0)

        groups = group_by_user(records)
        lookup = MetadataLookup(self._store)
        selected = await SegmentFilter(lookup).select(
            list(groups), query.anonymous, query.india
        )
        Log.info(f"{len(records)} records from {len(selected)} unique users")

        previews = PreviewResolver(
            self._storage,
            list_limit=self._preview_list_limit,
            ttl_seconds=self._signed_url_ttl_seconds,
        )
        assembler = ViewModelAssembler(previews, lookup, self._tz)
        return DashboardView(
            summary=summary,
            record_count=len(records),
            user_count=len(selected),
            groups=await assembler.assemble(selected, groups),
        )


def require_credentials(settings: Settings) -> None:
    if not settings.store_url.strip() or not settings.store_key.strip():
        raise ValidationError("Please provide both store URL and key")


@asynccontextmanager
async def open_dashboard(settings: Settings) -> AsyncGenerator[Dashboard, None]:
    """Session holding the configured clients for the lifetime of the block."""
    require_credentials(settings)
    tz = resolve_timezone(settings.display_timezone)
    use_postgres = settings.store_backend.lower() == "postgres"

    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        store = RecordStoreFactory.create(settings, client)
        storage = ObjectStorageClient(
            client=client,
            base_url=settings.store_url,
            api_key=settings.store_key,
            bucket=settings.storage_bucket,
        )
        if use_postgres:
            await init_pool(settings)
        try:
            Log.info(f"Connected to {settings.store_url} ({settings.store_backend} backend)")
            yield Dashboard(
                store,
                storage,
                tz,
                preview_list_limit=settings.preview_list_limit,
                signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
            )
        finally:
            if use_postgres:
                await close_pool()
