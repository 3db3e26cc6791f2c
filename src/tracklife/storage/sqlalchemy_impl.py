"""SQLAlchemy implementation of the key-value storage interface."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .interfaces import KeyValueStorage, StorageError
from ..db.database import create_database_engine, create_session_factory
from ..db.models import StorageSlot


class SQLAlchemyStorage(KeyValueStorage):
    """Stores each slot as one row of the ``storage_slots`` table.

    Every call opens its own session and commits before returning, so a
    write is durable as soon as ``set`` returns.
    """

    def __init__(self, engine: Optional[Engine] = None, database_url: Optional[str] = None):
        self._engine = engine or create_database_engine(database_url)
        self._session_factory: sessionmaker = create_session_factory(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> Optional[str]:
        """Get the raw value for a slot."""
        try:
            with self._session_factory() as session:
                slot = session.get(StorageSlot, key)
                return slot.value if slot is not None else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read slot '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Create or replace a slot."""
        try:
            with self._session_factory() as session:
                slot = session.get(StorageSlot, key)
                if slot is None:
                    session.add(StorageSlot(key=key, value=value))
                else:
                    slot.value = value
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write slot '{key}': {e}") from e

    def remove(self, key: str) -> None:
        """Delete a slot if present."""
        try:
            with self._session_factory() as session:
                slot = session.get(StorageSlot, key)
                if slot is not None:
                    session.delete(slot)
                    session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove slot '{key}': {e}") from e

    def keys(self) -> List[str]:
        """List stored slot keys in key order."""
        try:
            with self._session_factory() as session:
                return list(session.execute(select(StorageSlot.key).order_by(StorageSlot.key)).scalars())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list slots: {e}") from e

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
