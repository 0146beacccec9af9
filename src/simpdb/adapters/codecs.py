"""Codecs for the table file formats.

Each codec serializes a whole table, a mapping of record id to payload, as a
single document:

- `JsonCodec`: compact JSON, or tab-indented JSON with ``indent=True``.
- `YamlCodec`: block-style, ASCII-escaped YAML via PyYAML's safe dumper/loader.
- `BsonCodec`: a single BSON document via the ``bson`` package shipped with
  pymongo.

The logical shape, an object of id -> record payload, is the same for every
codec. Library exceptions are translated to `EncodeError` / `DecodeError`.
"""

from __future__ import annotations

import functools
import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import bson
import yaml
from bson.errors import BSONError

from simpdb.errors import DecodeError, EncodeError
from simpdb.interfaces.storage import UNBOUND, Codec, Payload

__all__ = [
    "BsonCodec",
    "CODEC_REGISTRY",
    "JsonCodec",
    "YamlCodec",
    "codec_for_path",
    "get_codec",
]


def _check_shape(document: Any, location: str) -> dict[str, Payload]:
    """Ensure a decoded document is a mapping of string ids to payload mappings."""
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise DecodeError(
            location, f"expected a mapping at top level, got {type(document).__name__}"
        )
    for key, value in document.items():
        if not isinstance(key, str):
            raise DecodeError(location, f"record id {key!r} is not a string")
        if not isinstance(value, dict):
            raise DecodeError(location, f"record {key!r} is not a mapping")
    return document


# ============================================================================
#                                 JSON
# ============================================================================


class JsonCodec(Codec):
    """JSON codec; ``indent=True`` writes one field per line, tab-indented."""

    extension = ".json"

    def __init__(self, indent: bool = False) -> None:
        self.indent = indent
        self.name = "json-indent" if indent else "json"

    def encode(
        self, payloads: Mapping[str, Payload], location: str = UNBOUND
    ) -> bytes:
        try:
            data = json.dumps(
                dict(payloads),
                indent="\t" if self.indent else None,
                ensure_ascii=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodeError(location, str(e)) from e
        return data

    def decode(self, data: bytes, location: str = UNBOUND) -> dict[str, Payload]:
        if not data.strip():
            return {}
        try:
            document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(location, str(e)) from e
        return _check_shape(document, location)


# ============================================================================
#                                 YAML
# ============================================================================


class YamlCodec(Codec):
    """YAML codec restricted to the safe subset of tags.

    Non-ASCII characters are written as escapes: PyYAML folds raw line
    separators such as U+0085 inside quoted scalars when reading them back.
    """

    name = "yaml"
    extension = ".yaml"

    def encode(
        self, payloads: Mapping[str, Payload], location: str = UNBOUND
    ) -> bytes:
        try:
            data = yaml.safe_dump(
                dict(payloads),
                sort_keys=False,
                allow_unicode=False,
                default_flow_style=False,
            ).encode("utf-8")
        except (yaml.YAMLError, UnicodeEncodeError) as e:
            raise EncodeError(location, str(e)) from e
        return data

    def decode(self, data: bytes, location: str = UNBOUND) -> dict[str, Payload]:
        if not data.strip():
            return {}
        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DecodeError(location, str(e)) from e
        return _check_shape(document, location)


# ============================================================================
#                                 BSON
# ============================================================================


class BsonCodec(Codec):
    """BSON codec; the table is stored as one top-level document."""

    name = "bson"
    extension = ".bson"

    def encode(
        self, payloads: Mapping[str, Payload], location: str = UNBOUND
    ) -> bytes:
        try:
            return bson.encode(dict(payloads))
        except (BSONError, OverflowError, TypeError, ValueError) as e:
            raise EncodeError(location, str(e)) from e

    def decode(self, data: bytes, location: str = UNBOUND) -> dict[str, Payload]:
        if not data:
            return {}
        try:
            document = bson.decode(data)
        except (BSONError, IndexError, ValueError) as e:
            raise DecodeError(location, str(e)) from e
        return _check_shape(document, location)


# ============================================================================
#                               Registry
# ============================================================================

CODEC_REGISTRY: dict[str, Callable[[], Codec]] = {
    "json": JsonCodec,
    "json-indent": functools.partial(JsonCodec, indent=True),
    "yaml": YamlCodec,
    "bson": BsonCodec,
}

SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".bson": "bson",
}


def get_codec(name: str) -> Codec:
    """Build a codec by format name.

    Args:
        name: One of the keys of `CODEC_REGISTRY` (case-insensitive).

    Returns:
        A fresh codec instance.

    Raises:
        ValueError: If the format is unknown.
    """
    if not (factory := CODEC_REGISTRY.get(name.lower())):
        known = ", ".join(sorted(CODEC_REGISTRY))
        raise ValueError(f"Unknown table format {name!r} (known: {known})")
    return factory()


def codec_for_path(path: str | Path) -> Codec:
    """Infer a codec from a table file suffix.

    Raises:
        ValueError: If the suffix does not belong to a known format.
    """
    suffix = Path(path).suffix.lower()
    if not (name := SUFFIX_FORMATS.get(suffix)):
        raise ValueError(f"Cannot infer table format from suffix {suffix!r}")
    return get_codec(name)
