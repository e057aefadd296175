class StoreError(Exception):
    """Base exception for all remote store errors."""


class FetchError(StoreError):
    """Raised when a record or metadata query against the store fails."""


class StorageError(StoreError):
    """Raised when listing or signing a stored object fails."""
