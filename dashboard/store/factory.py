import httpx

from dashboard.config.settings import Settings
from dashboard.pipeline.exceptions import ConfigurationError
from dashboard.store.base import BaseRecordStore
from dashboard.store.postgres_store import PostgresRecordStore
from dashboard.store.rest_store import RestRecordStore


class RecordStoreFactory:
    """Creates the record store configured by settings.store_backend."""

    BACKENDS: tuple[str, ...] = ("rest", "postgres")

    @classmethod
    def create(cls, settings: Settings, client: httpx.AsyncClient) -> BaseRecordStore:
        backend = settings.store_backend.lower()
        if backend == "rest":
            return RestRecordStore(
                client=client,
                base_url=settings.store_url,
                api_key=settings.store_key,
                records_table=settings.records_table,
                metadata_table=settings.metadata_table,
            )
        if backend == "postgres":
            return PostgresRecordStore(
                records_table=settings.records_table,
                metadata_table=settings.metadata_table,
            )
        raise ConfigurationError(
            f"Unknown store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
