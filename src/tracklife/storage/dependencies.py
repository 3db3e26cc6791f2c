"""Dependency injection for the storage layer."""

from typing import Optional

from .interfaces import KeyValueStorage
from .sqlalchemy_impl import SQLAlchemyStorage

_storage: Optional[KeyValueStorage] = None


def get_storage() -> KeyValueStorage:
    """
    Get the process-wide storage backend, creating it from configuration on first use.

    This is the main dependency injection point for storage.
    """
    global _storage
    if _storage is None:
        _storage = SQLAlchemyStorage()
    return _storage


def set_storage(storage: Optional[KeyValueStorage]) -> None:
    """Replace the process-wide storage backend (None forgets it)."""
    global _storage
    _storage = storage
