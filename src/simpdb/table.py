"""Tables: an in-memory record map bound to a storage.

A table loads its whole storage once when opened. Every read and mutation
afterwards works on the in-memory map; nothing reaches the storage until
`flush` (or `close`) serializes the whole map again. Mutations that are never
flushed are lost when the handle is discarded.

Typical usage
-------------
    with Table.open(storage) as users:
        users.insert(User(name="Harry", age=20))
        adults = users.where(lambda _, u: u.age >= 18).list().all()
    # leaving the block without an exception flushes

Thread-safety
-------------
One reentrant lock per table guards the map; views derived from the table
share it. Nothing coordinates separate processes: two processes flushing the
same resource overwrite each other.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any, Generic, TypeVar

from .errors import AlreadyPresentError, NotFoundError
from .interfaces.entity import Identifiable
from .interfaces.storage import Storage
from .optional import Optional
from .query import Comparator, ListView, Predicate, SelectView, Visitor

__all__ = ["Table"]

E = TypeVar("E", bound=Identifiable)

logger = logging.getLogger(__name__)


class Table(Generic[E]):
    """Access point for the records of one type."""

    def __init__(self, storage: Storage[E], records: dict[str, E] | None = None):
        self._storage = storage
        self._data: dict[str, E] = records if records is not None else {}
        self._lock = threading.RLock()

    @classmethod
    def open(cls, storage: Storage[E]) -> Table[E]:
        """Load a table from its storage.

        A storage whose resource does not exist yet yields an empty table.

        Raises:
            StorageUnavailableError: If the resource cannot be created or read.
            DecodeError: If existing content does not parse.
        """
        records = storage.load()
        logger.debug("Opened table %s (%d records)", storage.location, len(records))
        return cls(storage, records)

    @property
    def location(self) -> str:
        """The backing resource of this table."""
        return self._storage.location

    # --- Point operations ---

    def get(self, record_id: str) -> Optional[E]:
        """Look up a record by id."""
        with self._lock:
            if record_id in self._data:
                return Optional.of(self._data[record_id])
        return Optional.empty()

    def get_or_raise(self, record_id: str) -> E:
        """Look up a record by id.

        Raises:
            NotFoundError: If no record is stored under `record_id`.
        """
        with self._lock:
            try:
                return self._data[record_id]
            except KeyError:
                raise NotFoundError(record_id) from None

    def insert(self, record: E) -> bool:
        """Store `record` unless its id is already present.

        Returns:
            True if the record was stored; False (and no change) otherwise.
        """
        record_id = record.id()
        with self._lock:
            if record_id in self._data:
                return False
            self._data[record_id] = record
        return True

    def create(self, record: E) -> None:
        """Store `record`, which must be new.

        Raises:
            AlreadyPresentError: If its id is already present; nothing changes.
        """
        if not self.insert(record):
            raise AlreadyPresentError(record.id())

    def upsert(self, *records: E) -> None:
        """Store records, overwriting any stored under the same ids."""
        with self._lock:
            for record in records:
                self._data[record.id()] = record

    def delete_by_id(self, record_id: str) -> bool:
        """Remove the record stored under `record_id`.

        Returns:
            Whether a record was removed. An absent id is not an error.
        """
        with self._lock:
            return self._data.pop(record_id, None) is not None

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    # --- Queries (delegated to the unfiltered view) ---

    def view(self) -> SelectView[E]:
        """Return the unfiltered view over every record."""
        return SelectView(self._data, self._lock)

    def where(self, predicate: Predicate[E]) -> SelectView[E]:
        """Start a query with records satisfying `predicate`."""
        return self.view().where(predicate)

    filter = where

    def all(self) -> dict[str, E]:
        """Return a copy of every record, keyed by id."""
        return self.view().all()

    def list(self) -> ListView[E]:
        """Every record, ordered by id."""
        return self.view().list()

    def sort(self, less: Comparator[E]) -> ListView[E]:
        """Every record, ordered by `less`."""
        return self.view().sort(less)

    def sort_by(self, key: Callable[[E], Any], reverse: bool = False) -> ListView[E]:
        """Every record, ordered by a key function."""
        return self.view().sort_by(key, reverse)

    def iter(self, visit: Visitor[E]) -> None:
        """Visit every record, unordered (see `SelectView.iter`)."""
        self.view().iter(visit)

    def count(self) -> int:
        """Count every record."""
        return self.view().count()

    def delete(self) -> list[E]:
        """Remove every record and return them."""
        return self.view().delete()

    def update(self, transform: Callable[[E], E]) -> int:
        """Transform every record (see `SelectView.update`)."""
        return self.view().update(transform)

    # --- Persistence ---

    def flush(self) -> None:
        """Write the whole current table to its storage.

        Always performs a full write, even when nothing changed.

        Raises:
            StorageUnavailableError: If the resource cannot be written.
            EncodeError: If a record cannot be serialized.
        """
        with self._lock:
            self._storage.save(self._data)
        logger.debug("Flushed table %s", self._storage.location)

    def close(self) -> None:
        """Flush the table. The handle stays usable afterwards."""
        self.flush()

    def __enter__(self) -> Table[E]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Flush on a clean exit; discard pending changes on error."""
        if exc_type is None:
            self.close()
        else:
            logger.warning(
                "Table %s not flushed: block exited with %s",
                self._storage.location,
                exc_type.__name__,
            )

    def __repr__(self) -> str:
        return f"Table({self._storage.location!r}, records={len(self)})"
