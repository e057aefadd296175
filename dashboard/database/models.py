from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def parse_timestamp(value: datetime | str) -> datetime:
    """Accept a driver datetime or an ISO-8601 string; always return an aware datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class ProcessedRecord:
    """Represents a row from the processed_images table."""

    id: str
    user_id: str | None
    created_at: datetime
    task: Any = None
    result_url: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ProcessedRecord":
        user_id = row.get("user_id")
        return cls(
            id=str(row["id"]),
            user_id=str(user_id) if user_id is not None else None,
            created_at=parse_timestamp(row["created_at"]),
            task=row.get("task"),
            result_url=row.get("result_url"),
        )


@dataclass(frozen=True)
class UserMetadata:
    """Represents a row from the user_metadata table.

    Counters missing from the row, or stored as NULL, read as 0.
    """

    user_id: str
    is_anonymous: bool = False
    is_india: bool = False
    total_transforms: int = 0
    total_shares: int = 0
    total_likes: int = 0
    total_dislikes: int = 0
    total_buy_credits_calls: int = 0
    total_source_uploads: int = 0
    total_add_credits_calls: int = 0

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserMetadata":
        return cls(
            user_id=str(row["user_id"]),
            is_anonymous=bool(row.get("is_anonymous")),
            is_india=bool(row.get("is_india")),
            total_transforms=row.get("total_transforms") or 0,
            total_shares=row.get("total_shares") or 0,
            total_likes=row.get("total_likes") or 0,
            total_dislikes=row.get("total_dislikes") or 0,
            total_buy_credits_calls=row.get("total_buy_credits_calls") or 0,
            total_source_uploads=row.get("total_source_uploads") or 0,
            total_add_credits_calls=row.get("total_add_credits_calls") or 0,
        )
