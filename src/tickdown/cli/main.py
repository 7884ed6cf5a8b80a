"""CLI entry point for tickdown.

Uses Click to expose the ``tickdown`` command, which takes no arguments and
runs the interactive countdown session.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, TypeVar

import click
from textual.logging import TextualHandler

from tickdown.tui.app import SessionError, run_session

T = TypeVar("T")

LOG_LEVEL_ENV = "TICKDOWN_LOG_LEVEL"
LOG_FILE_ENV = "TICKDOWN_LOG_FILE"

_DEFAULT_LOG_LEVEL = logging.WARNING
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_level() -> int:
    """Return the level named by ``TICKDOWN_LOG_LEVEL``, or the default."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else _DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else _DEFAULT_LOG_LEVEL


def _configure_logging() -> None:
    """Route log records away from the terminal the app draws on.

    Records go to the textual devtools console, and to ``TICKDOWN_LOG_FILE``
    when that is set.
    """
    handlers: list[logging.Handler] = [TextualHandler()]
    log_file = os.environ.get(LOG_FILE_ENV)
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=_log_level(), format=_LOG_FORMAT, handlers=handlers, force=True)


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``SessionError`` to a CLI error.

    On ``SessionError`` the message is printed to stderr and the process
    exits with code 1.
    """
    try:
        return action()
    except SessionError as exc:
        click.echo(f"Error running program: {exc}", err=True)
        sys.exit(1)


@click.command()
def cli() -> None:
    """tickdown: count down a number of minutes in the terminal."""
    _configure_logging()
    _run(run_session)
