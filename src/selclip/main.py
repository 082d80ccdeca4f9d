"""CLI handling for selclip.

This module provides the command-line interface for selclip, handling
argument parsing via click, logging configuration, and dispatching to
the paste, copy or watch mode.

Usage:
    selclip --paste [--image] [--verbose] > FILE
    selclip --copy [--image] [--verbose] < FILE
    selclip --watch [--image] [--verbose]
"""

import asyncio
import sys

import click

from selclip.errors import ClipboardError
from selclip.formats import Format
from selclip.main_logging import configure_logging
from selclip.main_options import ModeFlag, selected_mode
from selclip.ownership import write
from selclip.probe import init
from selclip.reader import read
from selclip.watcher import watch

MODES = ("paste", "copy", "watch")


@click.command()
@click.option("--paste", cls=ModeFlag, modes=MODES, help="Write the clipboard to stdout")
@click.option(
    "--copy",
    cls=ModeFlag,
    modes=MODES,
    help="Put stdin on the clipboard and serve it until another client takes over",
)
@click.option("--watch", cls=ModeFlag, modes=MODES, help="Print a line for every clipboard change")
@click.option("--image", is_flag=True, help="Use image/png instead of UTF-8 text")
@click.option("--verbose", is_flag=True, envvar="SELCLIP_DEBUG", help="Enable DEBUG-level logging")
def main(paste: bool, copy: bool, watch: bool, image: bool, verbose: bool) -> None:
    """Read, write or watch the X11 clipboard."""
    mode = selected_mode(paste=paste, copy=copy, watch=watch)
    configure_logging(verbose)
    fmt = Format.IMAGE if image else Format.TEXT

    try:
        init()
        _run_mode(mode, fmt)
    except ClipboardError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _run_mode(mode: str, fmt: Format) -> None:
    """Run one CLI mode.

    Args:
        mode: One of MODES.
        fmt: The clipboard format to operate on.
    """
    if mode == "paste":
        click.get_binary_stream("stdout").write(read(fmt))
    elif mode == "copy":
        data = click.get_binary_stream("stdin").read()
        session = write(fmt, data)
        session.wait()
    else:
        try:
            asyncio.run(_print_changes(fmt))
        except KeyboardInterrupt:
            pass


async def _print_changes(fmt: Format) -> None:
    """Print a description of every clipboard change until interrupted."""
    session = await watch(fmt)
    try:
        async for data in session:
            click.echo(describe(fmt, data))
    finally:
        await session.aclose()


def describe(fmt: Format, data: bytes) -> str:
    """Return a one-line description of clipboard content."""
    if fmt is Format.TEXT:
        return data.decode("utf-8", errors="replace")
    return f"{fmt.value}: {len(data)} bytes"
