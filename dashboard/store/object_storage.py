from typing import Any
from urllib.parse import quote

import httpx

from dashboard.store.exceptions import StorageError
from dashboard.store.rest_store import auth_headers, error_message


class ObjectStorageClient:
    """Read-only access to one bucket of the project's object storage API."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        bucket: str,
    ) -> None:
        self._client = client
        self._storage_url = f"{base_url.rstrip('/')}/storage/v1"
        self._headers = auth_headers(api_key)
        self._bucket = bucket

    async def list_objects(
        self,
        prefix: str,
        *,
        limit: int = 100,
        sort_column: str = "created_at",
        sort_order: str = "desc",
    ) -> list[dict[str, Any]]:
        """List objects directly under prefix.

        Raises:
            StorageError: if the listing request fails or an entry has no name.
        """
        payload = await self._post(
            f"{self._storage_url}/object/list/{self._bucket}",
            {
                "prefix": prefix,
                "limit": limit,
                "offset": 0,
                "sortBy": {"column": sort_column, "order": sort_order},
            },
            what=f"Listing of '{prefix}'",
        )
        if not isinstance(payload, list) or not all(
            isinstance(entry, dict) and isinstance(entry.get("name"), str)
            for entry in payload
        ):
            raise StorageError(f"Listing of '{prefix}' returned an unexpected shape")
        return payload

    async def create_signed_url(self, path: str, expires_in: int) -> str:
        """Issue a time-limited URL for one object.

        Raises:
            StorageError: if signing fails or the response carries no URL.
        """
        payload = await self._post(
            f"{self._storage_url}/object/sign/{self._bucket}/{quote(path)}",
            {"expiresIn": expires_in},
            what=f"Signing of '{path}'",
        )
        signed = payload.get("signedURL") if isinstance(payload, dict) else None
        if not signed or not isinstance(signed, str):
            raise StorageError(f"Signing of '{path}' returned no URL")
        if signed.startswith("http"):
            return signed
        return f"{self._storage_url}{signed}"

    async def _post(self, url: str, body: dict[str, Any], *, what: str) -> Any:
        try:
            response = await self._client.post(url, json=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise StorageError(f"{what} failed: {exc}") from exc
        if response.is_error:
            raise StorageError(f"{what} failed: {error_message(response)}")
        try:
            return response.json()
        except ValueError as exc:
            raise StorageError(f"{what} returned a non-JSON response") from exc
