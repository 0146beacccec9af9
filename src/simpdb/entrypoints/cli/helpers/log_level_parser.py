"""Parsing of ``-L NAME=LEVEL`` logger-level options.

Values may be repeated on the command line or given as a single comma/space
separated list (e.g. from ``SIMPDB_LOGGER_LEVELS``).
"""

import logging
import re

import click

DEFAULT_LOGGER_LEVELS = {"simpdb": logging.DEBUG}


def _split_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten option values into NAME=LEVEL items, dropping empty fragments."""
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in re.split(r"[,\s]+", v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning NAME=LEVEL items into a name -> level mapping.

    Starts from `DEFAULT_LOGGER_LEVELS`; later items override earlier ones.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LOGGER_LEVELS)
    for item in _split_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_name.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = level
    return levels
