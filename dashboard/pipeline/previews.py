from dashboard.logging.logger import Log
from dashboard.pipeline.grouper import NO_USER_KEY
from dashboard.pipeline.models import PreviewSet
from dashboard.store.exceptions import StorageError
from dashboard.store.object_storage import ObjectStorageClient

PREVIEW_ROLES = ("source", "result", "target")


class PreviewResolver:
    """Resolves the latest stored image per role into a signed URL.

    One instance serves one dashboard invocation; each user is resolved at
    most once no matter how many records they own.
    """

    def __init__(
        self,
        storage: ObjectStorageClient,
        *,
        list_limit: int = 100,
        ttl_seconds: int = 3600,
    ) -> None:
        self._storage = storage
        self._list_limit = list_limit
        self._ttl_seconds = ttl_seconds
        self._cache: dict[str, PreviewSet] = {}

    async def resolve(self, user_key: str) -> PreviewSet:
        if user_key == NO_USER_KEY:
            return PreviewSet()
        if user_key not in self._cache:
            urls = {role: await self._resolve_role(user_key, role) for role in PREVIEW_ROLES}
            self._cache[user_key] = PreviewSet(**urls)
        return self._cache[user_key]

    async def _resolve_role(self, user_key: str, role: str) -> str | None:
        prefix = f"{user_key}/{role}"
        try:
            objects = await self._storage.list_objects(
                prefix,
                limit=self._list_limit,
                sort_column="created_at",
                sort_order="desc",
            )
            if not objects:
                return None
            latest = objects[0]["name"]
            return await self._storage.create_signed_url(
                f"{prefix}/{latest}", self._ttl_seconds
            )
        except StorageError as exc:
            Log.warning(f"Could not fetch {role} image for user {user_key}: {exc}")
            return None
