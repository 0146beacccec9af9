"""Record mappers converting records to plain payloads and back."""

from __future__ import annotations

import dataclasses
from typing import TypeVar

from simpdb.errors import DecodeError
from simpdb.interfaces.entity import Identifiable
from simpdb.interfaces.storage import Payload, RecordMapper

E = TypeVar("E", bound=Identifiable)


class DataclassMapper(RecordMapper[E]):
    """Maps dataclass records with `dataclasses.asdict` / keyword construction.

    Nested dataclasses are flattened to dicts on the way out; on the way in the
    payload is passed as keyword arguments, so nested records must be rebuilt
    by the record type itself (e.g. in ``__post_init__``).
    """

    def __init__(self, record_type: type[E]) -> None:
        if not dataclasses.is_dataclass(record_type):
            raise TypeError(f"{record_type.__name__} is not a dataclass")
        self.record_type = record_type

    def to_payload(self, record: E) -> Payload:
        return dataclasses.asdict(record)  # type: ignore[call-overload]

    def from_payload(self, payload: Payload) -> E:
        try:
            return self.record_type(**payload)
        except TypeError as e:
            raise DecodeError(self.record_type.__name__, str(e)) from e
