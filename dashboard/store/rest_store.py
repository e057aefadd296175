from typing import Any

import httpx

from dashboard.database.models import ProcessedRecord, UserMetadata
from dashboard.pipeline.time_window import TimeWindow
from dashboard.store.base import BaseRecordStore
from dashboard.store.exceptions import FetchError


def auth_headers(api_key: str) -> dict[str, str]:
    """Headers the hosted backend expects on every REST and storage call."""
    return {"apikey": api_key, "Authorization": f"Bearer {api_key}"}


def error_message(response: httpx.Response) -> str:
    """Pull the backend's own error message out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error_description", "error", "msg"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class RestRecordStore(BaseRecordStore):
    """Record store backed by the project's PostgREST endpoint."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        records_table: str,
        metadata_table: str,
    ) -> None:
        self._client = client
        self._rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self._headers = auth_headers(api_key)
        self._records_table = records_table
        self._metadata_table = metadata_table

    async def fetch_records(self, window: TimeWindow) -> list[ProcessedRecord]:
        rows = await self._select(
            self._records_table,
            [
                ("select", "*"),
                *self._window_params(window),
                ("order", "created_at.desc"),
            ],
            what="Database query",
        )
        return [ProcessedRecord.from_row(row) for row in rows]

    async def fetch_user_ids(self, window: TimeWindow) -> list[str]:
        rows = await self._select(
            self._records_table,
            [
                ("select", "user_id"),
                *self._window_params(window),
                ("user_id", "not.is.null"),
            ],
            what="Fetch of processed users",
        )
        unique: dict[str, None] = {}
        for row in rows:
            if row.get("user_id") is not None:
                unique[str(row["user_id"])] = None
        return list(unique)

    async def fetch_metadata(self, user_ids: list[str]) -> list[UserMetadata]:
        if not user_ids:
            return []
        in_list = ",".join(_quote(user_id) for user_id in user_ids)
        rows = await self._select(
            self._metadata_table,
            [("select", "*"), ("user_id", f"in.({in_list})")],
            what="Fetch of user metadata",
        )
        return [UserMetadata.from_row(row) for row in rows]

    async def find_metadata(self, user_id: str) -> UserMetadata | None:
        rows = await self._select(
            self._metadata_table,
            [("select", "*"), ("user_id", f"eq.{user_id}"), ("limit", "1")],
            what=f"Metadata lookup for user {user_id}",
        )
        if not rows:
            return None
        return UserMetadata.from_row(rows[0])

    @staticmethod
    def _window_params(window: TimeWindow) -> list[tuple[str, str]]:
        return [
            ("created_at", f"gte.{window.start_iso}"),
            ("created_at", f"lte.{window.end_iso}"),
        ]

    async def _select(
        self,
        table: str,
        params: list[tuple[str, str]],
        *,
        what: str,
    ) -> list[dict[str, Any]]:
        try:
            response = await self._client.get(
                f"{self._rest_url}/{table}",
                params=params,
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise FetchError(f"{what} failed: {exc}") from exc

        if response.is_error:
            raise FetchError(f"{what} failed: {error_message(response)}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(f"{what} failed: non-JSON response") from exc
        if not isinstance(payload, list):
            raise FetchError(f"{what} failed: unexpected response shape")
        return payload
