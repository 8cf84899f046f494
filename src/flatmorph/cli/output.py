"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import re
from typing import Any, Optional

import typer
from rich.console import Console as RichConsole
from rich.table import Table

from flatmorph.cli.config import CLIConfig
from flatmorph.mutation.literal_codec import DynamicImport, Opaque, UNDEFINED

_MARKUP_RE = re.compile(r"\[/?[a-z ]+\]")


class MachineAwareConsole:
    """
    A Console wrapper that prints plain text in machine mode and rich
    output otherwise.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if not CLIConfig.is_machine_mode():
            self._rich_console.print(*args, **kwargs)
            return

        for arg in args:
            if isinstance(arg, str):
                plain = _MARKUP_RE.sub("", arg).strip()
                if plain:
                    typer.echo(plain)
            elif isinstance(arg, Table):
                # Tables are human-only; use --json for data
                pass
            elif arg is not None:
                typer.echo(str(arg))

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def to_jsonable(value: Any) -> Any:
    """
    Convert a decoded config value into plain JSON data.

    Opaque expressions become their source text, dynamic imports become
    ``{"dynamicImport": path}`` and undefined becomes null.
    """
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    if isinstance(value, Opaque):
        return value.text
    if isinstance(value, DynamicImport):
        return {"dynamicImport": value.module_path}
    if value is UNDEFINED:
        return None
    return value


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        typer.echo(json.dumps(data, separators=(',', ':')))
    else:
        typer.echo(json.dumps(data, indent=2))


def print_error(message: str, code: Optional[str] = None, json_output: bool = False) -> None:
    """
    Print an error message respecting machine mode.
    In machine mode (or with --json) outputs a structured JSON error.
    """
    if CLIConfig.is_machine_mode() or json_output:
        error_obj = {"status": "error", "message": message}
        if code:
            error_obj["code"] = code
        print_json(error_obj, minified=True)
    else:
        _console.print(f"[red]Error: {message}[/red]")


def get_console() -> MachineAwareConsole:
    """Get the console instance."""
    return _console
