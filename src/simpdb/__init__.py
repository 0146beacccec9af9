"""simpdb

An embedded record store: each table keeps one collection of identifiable
records in memory and persists it, on demand, as a single JSON, YAML or BSON
document. Queries are composable views filtered and ordered lazily over the
table's records.
"""

from .database import Database
from .errors import (
    AlreadyPresentError,
    DecodeError,
    EncodeError,
    ErrorKind,
    NotFoundError,
    SimpDBError,
    StorageUnavailableError,
)
from .interfaces.entity import Identifiable
from .optional import Optional
from .query import ListView, SelectView
from .table import Table

__all__ = [
    "__version__",
    "AlreadyPresentError",
    "Database",
    "DecodeError",
    "EncodeError",
    "ErrorKind",
    "Identifiable",
    "ListView",
    "NotFoundError",
    "Optional",
    "SelectView",
    "SimpDBError",
    "StorageUnavailableError",
    "Table",
]
__version__ = "0.1.0"
