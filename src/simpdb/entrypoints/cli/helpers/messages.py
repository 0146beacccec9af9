"""Status lines for the simpdb CLI.

Messages go to stderr so stdout only ever carries table data.
"""

import click

GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
}


def glyph(kind: str) -> str:
    """Return the emoji for `kind`, or its ASCII fallback if stderr can't encode it."""
    emoji, fallback = GLYPHS[kind]
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return fallback
    return emoji


def warn(msg: str) -> None:
    """Print a yellow warning line to stderr."""
    click.secho(f"{glyph('warn')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Print a green success line to stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)
