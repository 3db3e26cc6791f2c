"""Generic domain store: CRUD over one persisted collection.

Each tracker keeps its records as one ordered JSON array under a single
storage key. Every mutation reads the collection, changes it in memory and
writes the whole collection back.

Persistence is best-effort:
- a missing, corrupt or invalid collection reads as the domain default
- a failed write is logged and swallowed
- update/delete of an unknown id is a silent no-op
"""

import json
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError  # type: ignore

from ..domain.records import BaseRecord
from ..storage.interfaces import KeyValueStorage, StorageError
from ..utils.logging_config import get_module_logger

logger = get_module_logger(__name__)

T = TypeVar("T", bound=BaseRecord)


class RecordValidationError(ValueError):
    """Raised when a record or patch does not fit the domain's record shape."""

    def __init__(self, namespace: str, message: str):
        super().__init__(f"[{namespace}] {message}")
        self.namespace = namespace


class DomainStore(Generic[T]):
    """CRUD over one typed collection stored under a fixed namespace key."""

    def __init__(
        self,
        storage: KeyValueStorage,
        namespace: str,
        record_type: Type[T],
        default_factory: Optional[Callable[[], List[T]]] = None,
    ):
        self._storage = storage
        self.namespace = namespace
        self.record_type = record_type
        self._default_factory = default_factory or list

    def __repr__(self) -> str:
        return f"<DomainStore(namespace='{self.namespace}', record={self.record_type.__name__})>"

    def default(self) -> List[T]:
        """The collection an unwritten (or unreadable) slot reads as."""
        return list(self._default_factory())

    def get_all(self) -> List[T]:
        """Return the persisted collection, or the default if it cannot be read.

        Never raises.
        """
        try:
            raw = self._storage.get(self.namespace)
        except StorageError as e:
            logger.error(f"Failed to read '{self.namespace}', using default: {e}")
            return self.default()

        if raw is None:
            return self.default()

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            return [self.record_type.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Discarding unreadable collection '{self.namespace}', using default: {e}")
            return self.default()

    def get(self, record_id: str) -> Optional[T]:
        """Return the first record with this id, or None."""
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def add(self, record: T) -> None:
        """Append a record to the end of the collection and persist it."""
        if not isinstance(record, self.record_type):
            raise RecordValidationError(
                self.namespace,
                f"expected {self.record_type.__name__}, got {type(record).__name__}",
            )
        records = self.get_all()
        records.append(record)
        self._persist(records)

    def add_from_dict(self, data: Mapping[str, Any]) -> T:
        """Validate raw data as a record, append it and return it."""
        record = self.build(data)
        self.add(record)
        return record

    def build(self, data: Mapping[str, Any]) -> T:
        """Validate raw data (field names or camelCase aliases) into a record."""
        try:
            return self.record_type.model_validate(dict(data))
        except ValidationError as e:
            raise RecordValidationError(self.namespace, str(e)) from e

    def update(self, record_id: str, patch: Mapping[str, Any]) -> None:
        """Shallow-merge patch over every record with this id and persist.

        Records with other ids are left untouched. The collection is
        persisted even when nothing matched.

        Raises:
            RecordValidationError: If patch names an unknown field or the
                merged record is invalid. Nothing is written in that case.
        """
        normalized = self._normalize_patch(patch)
        updated: List[T] = []
        for record in self.get_all():
            if record.id == record_id:
                merged = record.model_dump()
                merged.update(normalized)
                try:
                    record = self.record_type.model_validate(merged)
                except ValidationError as e:
                    raise RecordValidationError(self.namespace, str(e)) from e
            updated.append(record)
        self._persist(updated)

    def delete(self, record_id: str) -> None:
        """Remove every record with this id and persist."""
        remaining = [record for record in self.get_all() if record.id != record_id]
        self._persist(remaining)

    def reset(self) -> None:
        """Replace the collection with the domain default and persist."""
        self._persist(self.default())

    def _normalize_patch(self, patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Map patch keys (field names or aliases) onto model field names."""
        normalized: Dict[str, Any] = {}
        for key, value in patch.items():
            field_name = self.record_type.field_for_key(key)
            if field_name is None:
                raise RecordValidationError(
                    self.namespace, f"unknown field '{key}' for {self.record_type.__name__}"
                )
            normalized[field_name] = value
        return normalized

    def _persist(self, records: List[T]) -> None:
        """Serialize and store the whole collection. Write failures are swallowed."""
        payload = json.dumps([record.to_storage() for record in records])
        try:
            self._storage.set(self.namespace, payload)
        except StorageError as e:
            logger.error(f"Failed to persist '{self.namespace}' ({len(records)} records): {e}")
            return
        logger.debug(f"Persisted '{self.namespace}' ({len(records)} records)")
