"""Pytest fixtures for table storage contract tests.

Provided fixtures
-----------------
- **storage_factory**: Parametrized over every backend/codec pair. Calling it
  returns a storage bound to the *same* resource each time, so a test can save
  through one instance and load through a fresh one, as a reopening process
  would.

- **storage**: A single storage from `storage_factory`.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from simpdb.adapters.codecs import get_codec
from simpdb.adapters.mappers import DataclassMapper
from simpdb.adapters.storage import FileStorage, MemoryStorage
from simpdb.interfaces.storage import Storage
from tests.fixtures.records import User

# pylint: disable=redefined-outer-name

BACKENDS = [
    "memory-json",
    "file-json",
    "file-json-indent",
    "file-yaml",
    "file-bson",
]


@pytest.fixture(params=BACKENDS)
def storage_factory(
    request: pytest.FixtureRequest, tmp_path: Path
) -> Callable[[], Storage[User]]:
    """Return a factory of storages sharing one backing resource."""
    backend, _, fmt = request.param.partition("-")
    mapper = DataclassMapper(User)

    match backend:
        case "memory":
            shared = MemoryStorage(get_codec(fmt), mapper, name="users")
            return lambda: shared
        case "file":
            codec = get_codec(fmt)
            path = tmp_path / "db" / f"users{codec.extension}"
            return lambda: FileStorage(path, get_codec(fmt), mapper)
        case _:
            raise ValueError(f"unknown backend: {request.param}")


@pytest.fixture
def storage(storage_factory: Callable[[], Storage[User]]) -> Storage[User]:
    """A fresh storage for the requested backend."""
    return storage_factory()
