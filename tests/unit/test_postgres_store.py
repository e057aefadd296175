from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
import pytest

from dashboard.pipeline.time_window import TimeWindow
from dashboard.store.exceptions import FetchError
from dashboard.store.postgres_store import PostgresRecordStore

WINDOW = TimeWindow(
    start=datetime(2024, 1, 1, tzinfo=timezone.utc),
    end=datetime(2024, 1, 2, tzinfo=timezone.utc),
)


def _mock_connection(mock_get_conn: MagicMock, rows: list[dict]) -> AsyncMock:
    """Wire up an async connection + cursor and return the cursor."""
    cursor = AsyncMock()
    cursor.fetchall.return_value = rows

    @asynccontextmanager
    async def cursor_cm(*_args: object, **_kwargs: object):
        yield cursor

    conn = MagicMock()
    conn.cursor.side_effect = cursor_cm

    @asynccontextmanager
    async def connection_cm():
        yield conn

    mock_get_conn.side_effect = connection_cm
    return cursor


def _make_store() -> PostgresRecordStore:
    return PostgresRecordStore(records_table="processed_images", metadata_table="user_metadata")


class TestFetchRecords:
    @pytest.mark.asyncio
    @patch("dashboard.store.postgres_store.get_connection")
    async def test_maps_rows_and_passes_bounds(self, mock_get_conn: MagicMock) -> None:
        cursor = _mock_connection(
            mock_get_conn,
            [
                {
                    "id": 5,
                    "user_id": None,
                    "created_at": datetime(2024, 1, 1, 3, tzinfo=timezone.utc),
                    "task": {"style": "anime"},
                    "result_url": "https://cdn/r.png",
                }
            ],
        )

        records = await _make_store().fetch_records(WINDOW)

        assert records[0].id == "5"
        assert records[0].user_id is None
        assert records[0].task == {"style": "anime"}
        _query, params = cursor.execute.await_args.args
        assert params == (WINDOW.start, WINDOW.end)

    @pytest.mark.asyncio
    @patch("dashboard.store.postgres_store.get_connection")
    async def test_driver_error_becomes_fetch_error(self, mock_get_conn: MagicMock) -> None:
        cursor = _mock_connection(mock_get_conn, [])
        cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(FetchError, match="connection lost"):
            await _make_store().fetch_records(WINDOW)


class TestFetchUserIds:
    @pytest.mark.asyncio
    @patch("dashboard.store.postgres_store.get_connection")
    async def test_deduplicates(self, mock_get_conn: MagicMock) -> None:
        _mock_connection(mock_get_conn, [{"user_id": "b"}, {"user_id": "a"}, {"user_id": "b"}])

        assert await _make_store().fetch_user_ids(WINDOW) == ["b", "a"]


class TestMetadata:
    @pytest.mark.asyncio
    @patch("dashboard.store.postgres_store.get_connection")
    async def test_fetch_metadata_passes_id_list(self, mock_get_conn: MagicMock) -> None:
        cursor = _mock_connection(mock_get_conn, [{"user_id": "a", "total_shares": 2}])

        rows = await _make_store().fetch_metadata(["a", "b"])

        assert rows[0].total_shares == 2
        _query, params = cursor.execute.await_args.args
        assert params == (["a", "b"],)

    @pytest.mark.asyncio
    @patch("dashboard.store.postgres_store.get_connection")
    async def test_find_metadata_missing(self, mock_get_conn: MagicMock) -> None:
        _mock_connection(mock_get_conn, [])

        assert await _make_store().find_metadata("ghost") is None

    @pytest.mark.asyncio
    async def test_fetch_metadata_empty_ids_skips_query(self) -> None:
        assert await _make_store().fetch_metadata([]) == []
