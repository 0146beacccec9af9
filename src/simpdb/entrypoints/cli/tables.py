"""``simpdb table`` commands: inspect and convert table files.

These commands work on raw payloads through the codecs only, so they need no
record types: a table file is read as a mapping of id -> field mapping.

Behavior
- Table data is printed to **stdout** as JSON; status lines go to **stderr**.
- The format of a file is inferred from its suffix unless ``--format`` /
  ``--from`` / ``--to`` is given.
- Inspection never creates files: a missing table file is an error here,
  unlike when a table is opened through the library.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx

from simpdb import config
from simpdb.adapters.codecs import CODEC_REGISTRY, codec_for_path, get_codec
from simpdb.database import Database
from simpdb.errors import SimpDBError

from .helpers import success, warn

if TYPE_CHECKING:
    from simpdb.interfaces.storage import Codec, Payload

FORMAT_CHOICE = click.Choice(sorted(CODEC_REGISTRY), case_sensitive=False)

MISSING_DB_DIR_MSG = (
    "No database directory given and SIMPDB_DIR is not set.\n\n"
    "Pass one explicitly, e.g.:\n"
    "  simpdb table list ./db\n"
    "or set it for the session:\n"
    "  export SIMPDB_DIR=./db"
)


def _resolve_codec(path: Path, fmt: str | None) -> Codec:
    try:
        return get_codec(fmt) if fmt else codec_for_path(path)
    except ValueError as e:
        raise click.ClickException(f"{e}; pass --format explicitly.") from e


def _read_table(path: Path, codec: Codec) -> dict[str, Payload]:
    if not path.is_file():
        raise click.ClickException(f"No table file at {path}")
    try:
        return codec.decode(path.read_bytes(), str(path))
    except SimpDBError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e.strerror or e}") from e


@click.group(cls=clickx.ExtraGroup)
def table() -> None:
    """Inspect and convert table files."""


@table.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", type=FORMAT_CHOICE, help="Table format.")
@click.option(
    "--ids-only", is_flag=True, help="Print only the record ids, one per line."
)
def show(path: Path, fmt: str | None, ids_only: bool) -> None:
    """Print a table file as JSON."""
    payloads = _read_table(path, _resolve_codec(path, fmt))
    if ids_only:
        for record_id in sorted(payloads):
            click.echo(record_id)
        return
    click.echo(json.dumps(payloads, indent=2, sort_keys=True, default=str))


@table.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", type=FORMAT_CHOICE, help="Table format.")
def count(path: Path, fmt: str | None) -> None:
    """Print the number of records in a table file."""
    click.echo(len(_read_table(path, _resolve_codec(path, fmt))))


@table.command()
@click.argument("src", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("dst", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--from", "from_fmt", type=FORMAT_CHOICE, help="Format of SRC.")
@click.option("--to", "to_fmt", type=FORMAT_CHOICE, help="Format of DST.")
@click.option("--force", is_flag=True, help="Overwrite DST if it exists.")
def convert(
    src: Path, dst: Path, from_fmt: str | None, to_fmt: str | None, force: bool
) -> None:
    """Re-encode table SRC into DST using another format."""
    payloads = _read_table(src, _resolve_codec(src, from_fmt))
    dst_codec = _resolve_codec(dst, to_fmt)

    if dst.exists() and not force:
        warn(f"{dst} already exists.")
        click.confirm("Overwrite it?", abort=True)

    try:
        data = dst_codec.encode(payloads, str(dst))
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_bytes(data)
    except SimpDBError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"Cannot write {dst}: {e.strerror or e}") from e

    success(f"Converted {len(payloads)} records to {dst_codec.name}: {dst}")


@table.command(name="list")
@click.argument(
    "directory",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
def list_tables(directory: Path | None) -> None:
    """List table files in a database DIRECTORY (default: $SIMPDB_DIR)."""
    if directory is None:
        try:
            directory = Path(config.get_db_dir())
        except config.DatabaseDirNotSetError as e:
            raise click.ClickException(MISSING_DB_DIR_MSG) from e
    for name in Database(directory).tables():
        click.echo(name)
