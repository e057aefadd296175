from abc import ABC, abstractmethod

from dashboard.database.models import ProcessedRecord, UserMetadata
from dashboard.pipeline.time_window import TimeWindow


class BaseRecordStore(ABC):
    """Contract for all record store adapters. Every operation is read-only."""

    @abstractmethod
    async def fetch_records(self, window: TimeWindow) -> list[ProcessedRecord]:
        """Fetch processed records created within the window, newest first.

        Raises:
            FetchError: if the query fails.
        """

    @abstractmethod
    async def fetch_user_ids(self, window: TimeWindow) -> list[str]:
        """Fetch the distinct non-null user ids owning records in the window.

        Order follows first appearance in the store's response.

        Raises:
            FetchError: if the query fails.
        """

    @abstractmethod
    async def fetch_metadata(self, user_ids: list[str]) -> list[UserMetadata]:
        """Fetch metadata rows for the given user ids.

        Raises:
            FetchError: if the query fails.
        """

    @abstractmethod
    async def find_metadata(self, user_id: str) -> UserMetadata | None:
        """Point lookup of one user's metadata. None when no row exists.

        Raises:
            FetchError: if the query fails.
        """
