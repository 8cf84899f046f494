"""
Helpers shared by the CLI command groups.
"""

import json
from pathlib import Path
from typing import Any

import typer

from flatmorph.cli.config import CLIConfig
from flatmorph.cli.output import get_console, print_error
from flatmorph.exceptions import FlatmorphError
from flatmorph.logging_config import logger
from flatmorph.mutation import EditSession
from flatmorph.workspace import FileSystemWorkspace

console = get_console()


def get_workspace() -> FileSystemWorkspace:
    return FileSystemWorkspace(Path(CLIConfig.DEFAULT_ROOT))


def parse_value(raw: str) -> Any:
    """
    Parse a command-line rule value.

    JSON is tried first (``'["error", {"max": 2}]'``, ``2``); anything else
    is taken as a plain string (``warn``).
    """
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def fail(error: Exception, json_output: bool = False) -> None:
    """Report an error and exit with status 1."""
    code = type(error).__name__ if isinstance(error, FlatmorphError) else None
    logger.debug(f"Command failed: {error}")
    print_error(str(error), code=code, json_output=json_output)
    raise typer.Exit(code=1)


def finish(session: EditSession, dry_run: bool, message: str) -> None:
    """Print the edited text on --dry-run, otherwise save and confirm."""
    if dry_run:
        typer.echo(session.get_content(), nl=False)
        return
    try:
        session.save()
    except FlatmorphError as e:
        fail(e)
    console.print(f"[green]{message}[/green]")
