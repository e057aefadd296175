from dashboard.store.exceptions import FetchError, StorageError

__all__ = [
    "ConfigurationError",
    "DashboardError",
    "FetchError",
    "StorageError",
    "ValidationError",
]


class DashboardError(Exception):
    """Base exception for errors surfaced to the operator."""


class ValidationError(DashboardError):
    """Raised for missing or inconsistent operator input. Nothing is fetched."""


class ConfigurationError(DashboardError):
    """Raised when settings name something that does not exist, such as a store backend."""
