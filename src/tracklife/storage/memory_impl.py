"""In-memory key-value storage for tests and throwaway sessions."""

from typing import Dict, List, Optional

from .interfaces import KeyValueStorage


class MemoryStorage(KeyValueStorage):
    """In-memory implementation of KeyValueStorage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())
