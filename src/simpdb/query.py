"""Composable views over a table's records.

A view never owns data: it holds a reference to its table's record map and
lock, plus a predicate (and, for list views, an ordering). Composing views is
cheap and never copies; only materializing calls (`all`, `items`, `min`, ...)
produce new containers. Mutating calls (`delete`, `update`) act on the shared
map, so their effect is visible through the table and every sibling view.

    users.where(lambda _, u: u.age > 20).sort_by(lambda u: u.age).max()

Predicates receive ``(record_id, record)`` and must not mutate the table.
Comparators receive two records and answer "strictly before".
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .interfaces.entity import Identifiable
from .optional import Optional

if TYPE_CHECKING:
    import threading

__all__ = ["ListView", "SelectView", "by_id", "less_by"]

E = TypeVar("E", bound=Identifiable)

Predicate = Callable[[str, E], bool]
Comparator = Callable[[E, E], bool]
Visitor = Callable[[str, E], bool | None]

logger = logging.getLogger(__name__)


def _match_all(record_id: str, record: Any) -> bool:  # pylint: disable=unused-argument
    return True


def by_id(a: Identifiable, b: Identifiable) -> bool:
    """Default ordering: ascending by record id (lexicographic)."""
    return a.id() < b.id()


def less_by(key: Callable[[E], Any], reverse: bool = False) -> Comparator[E]:
    """Build a strict-less comparator from a key function."""
    if reverse:
        return lambda a, b: key(b) < key(a)
    return lambda a, b: key(a) < key(b)


class SelectView(Generic[E]):
    """A predicate-filtered view onto a table's records.

    Views are persistent: `where` returns a new view and leaves this one
    unchanged. Every traversal runs under the owning table's lock.
    """

    __slots__ = ("_data", "_lock", "_predicate")

    def __init__(
        self,
        data: dict[str, E],
        lock: threading.RLock,
        predicate: Predicate[E] = _match_all,
    ) -> None:
        self._data = data
        self._lock = lock
        self._predicate = predicate

    # --- Composition ---

    def where(self, predicate: Predicate[E]) -> SelectView[E]:
        """Narrow the view to records also satisfying `predicate`."""
        current = self._predicate

        def conjunction(record_id: str, record: E) -> bool:
            return current(record_id, record) and predicate(record_id, record)

        return SelectView(self._data, self._lock, conjunction)

    filter = where

    def list(self) -> ListView[E]:
        """Order the view by record id, ascending."""
        return ListView(self, by_id)

    def sort(self, less: Comparator[E]) -> ListView[E]:
        """Order the view with a strict-less comparator."""
        return ListView(self, less)

    def sort_by(self, key: Callable[[E], Any], reverse: bool = False) -> ListView[E]:
        """Order the view by a key function."""
        return ListView(self, less_by(key, reverse))

    # --- Materialization ---

    def items(self) -> list[tuple[str, E]]:
        """Return a snapshot of the matching ``(record_id, record)`` pairs."""
        with self._lock:
            return [
                (record_id, record)
                for record_id, record in self._data.items()
                if self._predicate(record_id, record)
            ]

    def all(self) -> dict[str, E]:
        """Return a copy of the matching records, keyed by id.

        The result is detached from the table, so the caller may mutate the
        table while iterating it.
        """
        return dict(self.items())

    def iter(self, visit: Visitor[E]) -> None:
        """Call ``visit(record_id, record)`` for every matching record.

        Order is unspecified. Returning ``False`` from `visit` stops the
        traversal. The matching set is captured before the first call, so
        `visit` may mutate the table.
        """
        for record_id, record in self.items():
            if visit(record_id, record) is False:
                break

    def count(self) -> int:
        """Count matching records."""
        with self._lock:
            return sum(
                1
                for record_id, record in self._data.items()
                if self._predicate(record_id, record)
            )

    def __len__(self) -> int:
        return self.count()

    # --- Mutation ---

    def delete(self) -> list[E]:
        """Remove every matching record from the table.

        Returns:
            The removed records, in traversal order.
        """
        with self._lock:
            matched = self.items()
            for record_id, _ in matched:
                del self._data[record_id]
        logger.debug("Deleted %d records", len(matched))
        return [record for _, record in matched]

    def update(self, transform: Callable[[E], E]) -> int:
        """Replace every matching record with ``transform(record)``.

        The matching ids are captured before any transform runs, so each
        originally matching record is transformed exactly once and records
        moved during this call are never matched again. A record whose id
        changes is moved to its new key; a record already stored under that key
        is overwritten.

        Returns:
            The number of records transformed.
        """
        with self._lock:
            matched = self.items()
            for old_id, record in matched:
                updated = transform(record)
                new_id = updated.id()
                # an earlier move in this call may have claimed old_id
                if new_id != old_id and self._data.get(old_id) is record:
                    del self._data[old_id]
                self._data[new_id] = updated
        logger.debug("Updated %d records", len(matched))
        return len(matched)


class ListView(Generic[E]):
    """A select view plus an ordering.

    Filtering and mutation are delegated to the wrapped `SelectView`; this
    class adds sorted materialization and extremum lookups.
    """

    __slots__ = ("_select", "_less")

    def __init__(self, select: SelectView[E], less: Comparator[E]) -> None:
        self._select = select
        self._less = less

    @property
    def select(self) -> SelectView[E]:
        """The unordered view this list is built on."""
        return self._select

    # --- Composition ---

    def where(self, predicate: Predicate[E]) -> ListView[E]:
        """Narrow the view, keeping the current ordering."""
        return ListView(self._select.where(predicate), self._less)

    filter = where

    def sort(self, less: Comparator[E]) -> ListView[E]:
        """Replace the ordering."""
        return ListView(self._select, less)

    def sort_by(self, key: Callable[[E], Any], reverse: bool = False) -> ListView[E]:
        """Replace the ordering with one built from a key function."""
        return ListView(self._select, less_by(key, reverse))

    # --- Materialization ---

    def all(self) -> list[E]:
        """Return the matching records sorted ascending by the comparator.

        With a comparator that is not a strict total order the result still
        holds exactly the matching records, in unspecified order.
        """
        records = [record for _, record in self._select.items()]
        records.sort(key=functools.cmp_to_key(self._compare))
        return records

    def min(self) -> Optional[E]:
        """Return the first record under the ordering, if any.

        Among records that are mutually not-less, the first one traversed is
        kept; traversal order is unspecified, so ties are not deterministic.
        """
        found = False
        best: E | None = None
        for _, record in self._select.items():
            if not found or self._less(record, best):  # type: ignore[arg-type]
                found, best = True, record
        return Optional.of(best) if found else Optional.empty()

    def max(self) -> Optional[E]:
        """Return the last record under the ordering, if any.

        Ties behave as in `min`.
        """
        found = False
        best: E | None = None
        for _, record in self._select.items():
            if not found or self._less(best, record):  # type: ignore[arg-type]
                found, best = True, record
        return Optional.of(best) if found else Optional.empty()

    first = min
    last = max

    # --- Delegated ---

    def items(self) -> list[tuple[str, E]]:
        """Unordered snapshot of matching pairs (see `SelectView.items`)."""
        return self._select.items()

    def iter(self, visit: Visitor[E]) -> None:
        """Unordered traversal (see `SelectView.iter`)."""
        self._select.iter(visit)

    def count(self) -> int:
        """Count matching records."""
        return self._select.count()

    def __len__(self) -> int:
        return self._select.count()

    def delete(self) -> list[E]:
        """Remove matching records (see `SelectView.delete`)."""
        return self._select.delete()

    def update(self, transform: Callable[[E], E]) -> int:
        """Transform matching records (see `SelectView.update`)."""
        return self._select.update(transform)

    # --- Internal Helpers ---

    def _compare(self, a: E, b: E) -> int:
        if self._less(a, b):
            return -1
        if self._less(b, a):
            return 1
        return 0
