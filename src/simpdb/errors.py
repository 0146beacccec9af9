"""Errors raised by simpdb tables and storages.

Every error carries an `ErrorKind` so callers can branch on the failure
category without matching on concrete classes.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure categories."""

    ALREADY_PRESENT = "already present"
    NOT_FOUND = "not found"
    STORAGE_UNAVAILABLE = "storage unavailable"
    DECODE_FAILURE = "decode failure"
    ENCODE_FAILURE = "encode failure"


class SimpDBError(Exception):
    """Base class for simpdb errors."""

    kind: ErrorKind


# ============================================================================
#                           Record errors
# ============================================================================


class AlreadyPresentError(SimpDBError):
    """Raised when creating a record whose id is already stored.

    Attributes:
        record_id (str): The id that is already present.
    """

    kind = ErrorKind.ALREADY_PRESENT

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Record '{record_id}' already exists.")
        self.record_id = record_id


class NotFoundError(SimpDBError):
    """Raised when a record is looked up by id and nothing is stored under it.

    Attributes:
        record_id (str | None): The id that was not found, if known.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, record_id: str | None = None) -> None:
        if record_id is None:
            message = "No record found."
        else:
            message = f"Record '{record_id}' not found."
        super().__init__(message)
        self.record_id = record_id


# ============================================================================
#                           Storage errors
# ============================================================================


class StorageError(SimpDBError):
    """Base class for errors reported by a storage backend.

    Attributes:
        location (str): The backing resource (file path or memory URI).
        reason (str): Short description of what went wrong.
    """

    verb = "access"

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Cannot {self.verb} table '{location}': {reason}")
        self.location = location
        self.reason = reason


class StorageUnavailableError(StorageError):
    """Raised when the backing resource cannot be created, read or written."""

    kind = ErrorKind.STORAGE_UNAVAILABLE


class DecodeError(StorageError):
    """Raised when stored content does not parse under the bound codec."""

    kind = ErrorKind.DECODE_FAILURE
    verb = "decode"


class EncodeError(StorageError):
    """Raised when in-memory records cannot be serialized."""

    kind = ErrorKind.ENCODE_FAILURE
    verb = "encode"
