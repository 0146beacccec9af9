"""Database handle: a directory holding one file per table."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TypeVar

from . import config
from .adapters.codecs import SUFFIX_FORMATS, get_codec
from .adapters.mappers import DataclassMapper
from .adapters.storage import FileStorage
from .interfaces.entity import Identifiable
from .interfaces.storage import RecordMapper
from .table import Table

__all__ = ["Database"]

E = TypeVar("E", bound=Identifiable)

logger = logging.getLogger(__name__)


class Database:
    """Handle on a database directory.

    Table files are named ``<table name><codec extension>`` inside the
    directory, which is created on first table load if missing. Each call to
    `table` opens an independent table with its own lock.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """The database directory."""
        return self._directory

    def table_path(self, name: str, fmt: str | None = None) -> Path:
        """Return the file a table named `name` uses under format `fmt`.

        `fmt` defaults to `config.get_default_format()`.

        Raises:
            ValueError: If `name` is not a plain file name or `fmt` is unknown.
        """
        if not name or Path(name).name != name or name in {".", ".."}:
            raise ValueError(f"Invalid table name {name!r}")
        codec = get_codec(fmt or config.get_default_format())
        return self._directory / f"{name}{codec.extension}"

    def table(
        self,
        record_type: type[E],
        name: str,
        fmt: str | None = None,
        mapper: RecordMapper[E] | None = None,
    ) -> Table[E]:
        """Open the table `name` holding records of `record_type`.

        Args:
            record_type: The record class; must be a dataclass unless `mapper`
                is given.
            name: Table name, used as the file stem.
            fmt: Codec name (see `simpdb.adapters.codecs.CODEC_REGISTRY`);
                defaults to `config.get_default_format()`.
            mapper: Custom record mapper; defaults to `DataclassMapper`.

        Raises:
            ValueError: If `name` or `fmt` is invalid.
            StorageUnavailableError: If the table file cannot be created or read.
            DecodeError: If the table file does not parse.
        """
        fmt = fmt or config.get_default_format()
        storage = FileStorage(
            self.table_path(name, fmt),
            get_codec(fmt),
            mapper if mapper is not None else DataclassMapper(record_type),
        )
        logger.debug("Opening table %r (%s) in %s", name, fmt, self._directory)
        return Table.open(storage)

    def tables(self) -> list[str]:
        """Names of table files present in the directory, sorted."""
        if not self._directory.is_dir():
            return []
        return sorted(
            path.stem
            for path in self._directory.iterdir()
            if path.is_file() and path.suffix.lower() in SUFFIX_FORMATS
        )
