from pathlib import Path

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from dashboard.logging.logger import Log
from dashboard.pipeline.segments import AnonymousSegment, IndiaSegment


class Preferences(BaseModel):
    """Operator settings remembered between runs."""

    store_url: str = ""
    store_key: str = ""
    start_date: str | None = None
    end_date: str | None = None
    anonymous_filter: AnonymousSegment = AnonymousSegment.ALL
    india_filter: IndiaSegment = IndiaSegment.ALL


class PreferencesStore:
    """Key-value preferences kept as a JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> Preferences:
        """Read saved preferences. A missing or unreadable file yields defaults."""
        if not self._path.exists():
            return Preferences()
        try:
            return Preferences.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ModelValidationError) as exc:
            Log.warning(f"Ignoring unreadable preferences at {self._path}: {exc}")
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(preferences.model_dump_json(indent=2), encoding="utf-8")

    def save_credentials(self, store_url: str, store_key: str) -> Preferences:
        preferences = self.load().model_copy(
            update={"store_url": store_url, "store_key": store_key}
        )
        self.save(preferences)
        return preferences

    def save_window(self, start_date: str, end_date: str) -> Preferences:
        preferences = self.load().model_copy(
            update={"start_date": start_date, "end_date": end_date}
        )
        self.save(preferences)
        return preferences

    def save_filters(
        self,
        anonymous_filter: AnonymousSegment,
        india_filter: IndiaSegment,
    ) -> Preferences:
        preferences = self.load().model_copy(
            update={"anonymous_filter": anonymous_filter, "india_filter": india_filter}
        )
        self.save(preferences)
        return preferences
