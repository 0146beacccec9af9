"""Table storages built from a codec and a record mapper.

Exports
-------
- FileStorage: one file per table on the local filesystem.
- MemoryStorage: encoded bytes kept in RAM, for tests and ephemeral tables.

Both share the same encode/decode path: records are mapped to payloads, the
codec turns the whole table into one blob, and every load verifies that each
record reports the id it is stored under.
"""

from __future__ import annotations

import abc
import logging
import os
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import TypeVar

from simpdb.errors import DecodeError, EncodeError, StorageUnavailableError
from simpdb.interfaces.entity import Identifiable
from simpdb.interfaces.storage import Codec, RecordMapper, Storage

__all__ = ["FileStorage", "MemoryStorage"]

E = TypeVar("E", bound=Identifiable)

logger = logging.getLogger(__name__)


class _CodecStorage(Storage[E]):
    """Shared load/save mechanics; subclasses only move bytes."""

    def __init__(self, codec: Codec, mapper: RecordMapper[E]) -> None:
        self.codec = codec
        self.mapper = mapper

    def load(self) -> dict[str, E]:
        data = self._read_bytes()
        payloads = self.codec.decode(data, self.location)

        records: dict[str, E] = {}
        for key, payload in payloads.items():
            try:
                record = self.mapper.from_payload(payload)
            except DecodeError as e:
                raise DecodeError(self.location, f"record {key!r}: {e.reason}") from e
            if (record_id := record.id()) != key:
                raise DecodeError(
                    self.location,
                    f"record stored under {key!r} reports id {record_id!r}",
                )
            records[key] = record

        logger.debug("Loaded %d records from %s", len(records), self.location)
        return records

    def save(self, records: Mapping[str, E]) -> None:
        try:
            payloads = {key: self.mapper.to_payload(r) for key, r in records.items()}
        except (TypeError, ValueError) as e:
            raise EncodeError(self.location, str(e)) from e
        self._write_bytes(self.codec.encode(payloads, self.location))
        logger.debug("Saved %d records to %s", len(records), self.location)

    # --- Internal Helpers ---

    @abc.abstractmethod
    def _read_bytes(self) -> bytes:
        """Return the stored blob, initializing an empty table if missing."""

    @abc.abstractmethod
    def _write_bytes(self, data: bytes) -> None:
        """Replace the stored blob with `data`."""


class FileStorage(_CodecStorage[E]):
    """Table storage backed by a single file on the local filesystem.

    Missing parent directories and a missing file are created on first load;
    the new file holds the codec's encoding of the empty table. Saves go to a
    temporary file in the same directory which then atomically replaces the
    table file, so an interrupted save leaves the previous content intact.
    """

    def __init__(
        self, path: str | os.PathLike[str], codec: Codec, mapper: RecordMapper[E]
    ) -> None:
        super().__init__(codec, mapper)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Path of the table file."""
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def _read_bytes(self) -> bytes:
        try:
            if not self._path.exists():
                self._initialize()
            return self._path.read_bytes()
        except OSError as e:
            raise StorageUnavailableError(self.location, e.strerror or str(e)) from e

    def _initialize(self) -> None:
        logger.debug("Initializing empty table at %s", self.location)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_bytes(self.codec.encode({}, self.location))

    def _write_bytes(self, data: bytes) -> None:
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self._path.parent, prefix=f".{self._path.name}.", delete=False
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(data)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StorageUnavailableError(self.location, e.strerror or str(e)) from e


class MemoryStorage(_CodecStorage[E]):
    """Table storage holding the encoded table in RAM.

    Data is lost when the process exits. The blob goes through the same codec
    as a file would, so codec behavior is exercised without touching disk.
    """

    def __init__(
        self, codec: Codec, mapper: RecordMapper[E], name: str = "memory"
    ) -> None:
        super().__init__(codec, mapper)
        self._name = name
        self._data: bytes | None = None
        self._lock = threading.Lock()

    @property
    def location(self) -> str:
        return f"mem://{self._name}"

    @property
    def contents(self) -> bytes | None:
        """The stored blob, or None if the table was never loaded or saved."""
        with self._lock:
            return self._data

    def _read_bytes(self) -> bytes:
        with self._lock:
            if self._data is None:
                self._data = self.codec.encode({}, self.location)
            return self._data

    def _write_bytes(self, data: bytes) -> None:
        with self._lock:
            self._data = data
