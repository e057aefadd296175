from enum import Enum

from dashboard.database.models import UserMetadata
from dashboard.logging.logger import Log
from dashboard.pipeline.grouper import NO_USER_KEY
from dashboard.store.base import BaseRecordStore
from dashboard.store.exceptions import FetchError


class AnonymousSegment(str, Enum):
    ALL = "all"
    ANONYMOUS_ONLY = "anonymous-only"
    REGISTERED_ONLY = "registered-only"


class IndiaSegment(str, Enum):
    ALL = "all"
    INDIA_ONLY = "india-only"
    NON_INDIA_ONLY = "non-india-only"


def matches_segments(
    metadata: UserMetadata,
    anonymous: AnonymousSegment,
    india: IndiaSegment,
) -> bool:
    """True when the user passes both selectors."""
    if anonymous is AnonymousSegment.ANONYMOUS_ONLY and not metadata.is_anonymous:
        return False
    if anonymous is AnonymousSegment.REGISTERED_ONLY and metadata.is_anonymous:
        return False
    if india is IndiaSegment.INDIA_ONLY and not metadata.is_india:
        return False
    if india is IndiaSegment.NON_INDIA_ONLY and metadata.is_india:
        return False
    return True


class MetadataLookup:
    """Per-invocation cache of single-user metadata lookups.

    A failed lookup is remembered as "no metadata" so it is neither retried
    nor reported twice.
    """

    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store
        self._cache: dict[str, UserMetadata | None] = {}

    async def get(self, user_key: str) -> UserMetadata | None:
        if user_key == NO_USER_KEY:
            return None
        if user_key not in self._cache:
            self._cache[user_key] = await self._lookup(user_key)
        return self._cache[user_key]

    async def _lookup(self, user_key: str) -> UserMetadata | None:
        try:
            return await self._store.find_metadata(user_key)
        except FetchError as exc:
            Log.warning(f"Could not fetch metadata for user {user_key}: {exc}")
            return None


class SegmentFilter:
    """Narrows grouped user keys to the requested segments."""

    def __init__(self, lookup: MetadataLookup) -> None:
        self._lookup = lookup

    async def select(
        self,
        user_keys: list[str],
        anonymous: AnonymousSegment,
        india: IndiaSegment,
    ) -> list[str]:
        """Return the keys to display, in input order.

        Users without known metadata (including the no-user bucket) always pass.
        """
        selected: list[str] = []
        for user_key in user_keys:
            metadata = await self._lookup.get(user_key)
            if metadata is None or matches_segments(metadata, anonymous, india):
                selected.append(user_key)
        return selected
