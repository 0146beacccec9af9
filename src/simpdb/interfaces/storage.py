"""Storage interface definitions.

A table persists through three collaborating pieces:

* a `Codec` turns a plain payload mapping (id -> field dict) into bytes and
  back; it knows nothing about record types;
* a `RecordMapper` turns a record into its field dict and back;
* a `Storage` binds both to a backing resource and exposes whole-table
  `load` / `save`.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from .entity import Identifiable

E = TypeVar("E", bound=Identifiable)

Payload = dict[str, Any]

UNBOUND = "<bytes>"  # location reported when a codec is used on its own


class Codec(abc.ABC):
    """Encodes a mapping of id -> payload to bytes and back."""

    name: str  # e.g. "json", "yaml", ...
    extension: str  # e.g. ".json", ".yaml", ...

    @abc.abstractmethod
    def encode(
        self, payloads: Mapping[str, Payload], location: str = UNBOUND
    ) -> bytes:
        """Serialize the whole table.

        Args:
            payloads: Mapping of record id to record payload.
            location: Resource the bytes are meant for, used in error messages.

        Raises:
            EncodeError: If a payload holds values the codec cannot represent.
        """

    @abc.abstractmethod
    def decode(self, data: bytes, location: str = UNBOUND) -> dict[str, Payload]:
        """Deserialize the whole table.

        Empty input decodes to an empty mapping.

        Args:
            data: The serialized table.
            location: Resource the bytes came from, used in error messages.

        Raises:
            DecodeError: If `data` does not parse, or does not hold a mapping of
                string ids to payload mappings.
        """


class RecordMapper(abc.ABC, Generic[E]):
    """Maps between records and their plain payloads."""

    @abc.abstractmethod
    def to_payload(self, record: E) -> Payload:
        """Convert a record to a payload of plain values."""

    @abc.abstractmethod
    def from_payload(self, payload: Payload) -> E:
        """Build a record from its payload.

        Raises:
            DecodeError: If the payload does not describe a valid record.
        """


class Storage(abc.ABC, Generic[E]):
    """Loads and saves one table as a single serialized blob."""

    @property
    @abc.abstractmethod
    def location(self) -> str:
        """Identify the backing resource (file path or memory URI)."""

    @abc.abstractmethod
    def load(self) -> dict[str, E]:
        """Read every record of the table.

        A resource that does not exist yet is initialized to an empty table
        (creating parent directories as needed) instead of failing.

        Raises:
            StorageUnavailableError: If the resource cannot be created or read.
            DecodeError: If existing content does not parse.
        """

    @abc.abstractmethod
    def save(self, records: Mapping[str, E]) -> None:
        """Overwrite the resource with exactly `records`.

        Raises:
            StorageUnavailableError: If the resource cannot be written.
            EncodeError: If a record cannot be serialized.
        """
