"""Unit tests for simpdb.adapters.mappers.DataclassMapper."""

import pytest

from simpdb.adapters.mappers import DataclassMapper
from simpdb.errors import DecodeError
from tests.fixtures.records import User


def test_to_payload_uses_field_names():
    """Records become plain dicts keyed by field name."""
    mapper = DataclassMapper(User)
    payload = mapper.to_payload(User("Harry", 20, True, ["seeker"]))
    assert payload == {"name": "Harry", "age": 20, "gender": True, "tags": ["seeker"]}


def test_from_payload_builds_record():
    """Payloads are passed to the record type as keyword arguments."""
    mapper = DataclassMapper(User)
    assert mapper.from_payload({"name": "Ron", "age": 19}) == User("Ron", 19)


def test_payload_is_detached_from_record():
    """Mutating a payload does not reach back into the record."""
    user = User("Harry", 20, tags=["seeker"])
    payload = DataclassMapper(User).to_payload(user)
    payload["tags"].append("captain")
    assert user.tags == ["seeker"]


def test_unknown_field_raises_decode_error():
    """A payload with fields the record does not have is rejected."""
    with pytest.raises(DecodeError) as excinfo:
        DataclassMapper(User).from_payload({"name": "Ron", "age": 1, "wand": "?"})
    assert excinfo.value.location == "User"


def test_missing_field_raises_decode_error():
    """A payload missing a required field is rejected."""
    with pytest.raises(DecodeError):
        DataclassMapper(User).from_payload({"name": "Ron"})


def test_rejects_non_dataclass():
    """Only dataclass record types can use the default mapper."""
    with pytest.raises(TypeError, match="not a dataclass"):
        DataclassMapper(dict)  # type: ignore[type-var]
