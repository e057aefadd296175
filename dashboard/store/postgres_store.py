from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from dashboard.database.connection import get_connection
from dashboard.database.models import ProcessedRecord, UserMetadata
from dashboard.pipeline.time_window import TimeWindow
from dashboard.store.base import BaseRecordStore
from dashboard.store.exceptions import FetchError


class PostgresRecordStore(BaseRecordStore):
    """Record store reading the project's Postgres database directly."""

    def __init__(self, *, records_table: str, metadata_table: str) -> None:
        self._records = sql.Identifier(records_table)
        self._metadata = sql.Identifier(metadata_table)

    async def fetch_records(self, window: TimeWindow) -> list[ProcessedRecord]:
        rows = await self._fetch_all(
            sql.SQL(
                """
                SELECT id, user_id, created_at, task, result_url
                FROM {}
                WHERE created_at >= %s
                  AND created_at <= %s
                ORDER BY created_at DESC
                """
            ).format(self._records),
            (window.start, window.end),
            what="Database query",
        )
        return [ProcessedRecord.from_row(row) for row in rows]

    async def fetch_user_ids(self, window: TimeWindow) -> list[str]:
        rows = await self._fetch_all(
            sql.SQL(
                """
                SELECT user_id
                FROM {}
                WHERE created_at >= %s
                  AND created_at <= %s
                  AND user_id IS NOT NULL
                """
            ).format(self._records),
            (window.start, window.end),
            what="Fetch of processed users",
        )
        return list(dict.fromkeys(str(row["user_id"]) for row in rows))

    async def fetch_metadata(self, user_ids: list[str]) -> list[UserMetadata]:
        if not user_ids:
            return []
        rows = await self._fetch_all(
            sql.SQL("SELECT * FROM {} WHERE user_id::text = ANY(%s)").format(self._metadata),
            (user_ids,),
            what="Fetch of user metadata",
        )
        return [UserMetadata.from_row(row) for row in rows]

    async def find_metadata(self, user_id: str) -> UserMetadata | None:
        rows = await self._fetch_all(
            sql.SQL("SELECT * FROM {} WHERE user_id::text = %s LIMIT 1").format(
                self._metadata
            ),
            (user_id,),
            what=f"Metadata lookup for user {user_id}",
        )
        if not rows:
            return None
        return UserMetadata.from_row(rows[0])

    async def _fetch_all(
        self,
        query: sql.Composed,
        params: tuple[Any, ...],
        *,
        what: str,
    ) -> list[dict[str, Any]]:
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    return await cur.fetchall()
        except psycopg.Error as exc:
            raise FetchError(f"{what} failed: {exc}") from exc
