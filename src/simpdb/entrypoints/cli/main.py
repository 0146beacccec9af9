"""simpdb CLI entry point.

Defines the top-level ``simpdb`` command (via Click-Extra), configures
logging, and registers subcommands.

Currently available groups
- ``simpdb table``: inspect and convert table files (show/count/convert/list).

Examples
    $ simpdb --version
    $ simpdb table show db/users.json
    $ simpdb -v table convert db/users.json db/users.yaml
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from simpdb import __version__
from simpdb.logging import config_console_handler, config_flight_recorder, log_startup

from .helpers.log_level_parser import parse_log_level
from .tables import table as table_group

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """simpdb command-line interface.

    simpdb stores each table of records as a single JSON, YAML or BSON file.
    These commands inspect table files and convert them between formats
    without needing the record types of the application that wrote them.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Lower the console threshold (default WARNING) one level per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Raise the console threshold (default WARNING) one level per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug output (timestamps, logger names, source locations).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File the flight recorder writes to.",
    default=Path(user_log_dir("simpdb", appauthor=False)) / "latest.log",
    envvar="SIMPDB_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Buffer DEBUG records in memory and write them to --log-path when a "
        "WARNING or ERROR occurs. Console verbosity is unaffected."
    ),
    default=False,
    show_default=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set the minimum level of specific loggers (NAME=LEVEL). Repeatable, "
        "or a comma/space list via SIMPDB_LOGGER_LEVELS."
    ),
    envvar="SIMPDB_LOGGER_LEVELS",
    show_envvar=True,
)
@clickx.pass_context
def simpdb(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """simpdb command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(config_flight_recorder(path=log_path))

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path if flight_recorder else None,
        flight_recorder=flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


simpdb.add_command(table_group)
