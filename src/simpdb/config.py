"""Configuration utilities for simpdb.

Settings come from the environment so the library and the CLI agree on them.
"""

import os

from simpdb.adapters.codecs import CODEC_REGISTRY

DB_DIR_ENV = "SIMPDB_DIR"  # pragma: no mutate
FORMAT_ENV = "SIMPDB_FORMAT"  # pragma: no mutate
DEFAULT_FORMAT = "json"


class DatabaseDirNotSetError(Exception):
    """Raised when the SIMPDB_DIR environment variable is not set."""


def get_db_dir() -> str:
    """Get the database directory from the environment.

    Returns:
        The value of the `SIMPDB_DIR` environment variable.

    Raises:
        DatabaseDirNotSetError: If `SIMPDB_DIR` is not set.
    """
    if not (directory := os.environ.get(DB_DIR_ENV)):
        raise DatabaseDirNotSetError
    return directory


def get_default_format() -> str:
    """Get the default table format from the environment.

    Returns:
        The lower-cased value of `SIMPDB_FORMAT`, or ``"json"`` when unset.

    Raises:
        ValueError: If `SIMPDB_FORMAT` names an unknown format.
    """
    fmt = (os.environ.get(FORMAT_ENV) or DEFAULT_FORMAT).lower()
    if fmt not in CODEC_REGISTRY:
        raise ValueError(f"{FORMAT_ENV}={fmt!r} is not a known table format")
    return fmt
