"""Abstract key-value storage interface used by the domain stores."""

from abc import ABC, abstractmethod
from typing import List, Optional


class StorageError(Exception):
    """Raised when a storage backend fails to read or write a slot."""

    pass


class KeyValueStorage(ABC):
    """Flat key-value namespace holding one serialized collection per key."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored under key, or None if never written."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StorageError: If the value could not be written
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing a missing key is a no-op."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List every key currently holding a value."""
        pass
