"""
CLI ESLint Commands

list, add-rule, remove-rule
"""

from pathlib import Path
from typing import List

import typer
from rich.table import Table

from flatmorph.exceptions import FlatmorphError
from flatmorph.mutation import EslintConfigEditor
from flatmorph.mutation.literal_codec import encode
from .common import fail, finish, get_workspace, parse_value
from .output import get_console, print_json, to_jsonable

app = typer.Typer()
console = get_console()


def _open(file: Path, json_output: bool = False) -> EslintConfigEditor:
    try:
        return EslintConfigEditor(get_workspace(), str(file))
    except FlatmorphError as e:
        fail(e, json_output)


@app.command("list")
def list_cmd(
    file: Path = typer.Argument(..., help="ESLint flat config file", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the entries of an ESLint flat config.
    """
    editor = _open(file, json_output)
    configs = editor.get_configs()

    if json_output:
        print_json(to_jsonable(configs))
        return

    table = Table(title=str(file))
    table.add_column("#", justify="right")
    table.add_column("files")
    table.add_column("rules")
    for index, config in enumerate(configs):
        files = ", ".join(config.get("files", [])) or "*"
        rules = config.get("rules", {})
        table.add_row(str(index), files, str(len(rules)) if isinstance(rules, dict) else "?")
    console.print(table)

    for index, config in enumerate(configs):
        for name, value in (config.get("rules") or {}).items():
            console.print(f"{index} {name} {encode(value) if value is not None else ''}".rstrip())


@app.command("add-rule")
def add_rule_cmd(
    file: Path = typer.Argument(..., help="ESLint flat config file", exists=True, dir_okay=False),
    rule: str = typer.Argument(..., help="Rule name, e.g. no-console"),
    value: str = typer.Argument(..., help="Rule value; JSON or a plain string"),
    files: List[str] = typer.Option(..., "--files", "-f", help="File pattern of the target entry (repeatable)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing"),
):
    """
    Add or update a rule in the entry matching --files.

    An existing rule is updated in place; otherwise the rule is appended,
    creating the entry when needed.
    """
    editor = _open(file)
    try:
        editor.ensure_rule(files, rule, parse_value(value))
    except FlatmorphError as e:
        fail(e)
    finish(editor, dry_run, f"Set {rule} for {', '.join(files)}")


@app.command("remove-rule")
def remove_rule_cmd(
    file: Path = typer.Argument(..., help="ESLint flat config file", exists=True, dir_okay=False),
    rule: str = typer.Argument(..., help="Rule name"),
    files: List[str] = typer.Option(..., "--files", "-f", help="File pattern of the target entry (repeatable)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing"),
):
    """
    Remove a rule from the entry matching --files.
    """
    editor = _open(file)
    if not editor.has_rule(files, rule):
        console.print(f"[yellow]Rule {rule} not configured for {', '.join(files)}[/yellow]")
        return
    editor.remove_rule(files, rule)
    finish(editor, dry_run, f"Removed {rule} from {', '.join(files)}")
