"""
CLI Import Commands

list, ensure, remove
"""

from pathlib import Path

import typer
from rich.table import Table

from flatmorph.exceptions import FlatmorphError
from flatmorph.mutation import ImportEditor
from flatmorph.schemas import ImportKind
from .common import fail, finish, get_workspace
from .output import get_console, print_json

app = typer.Typer()
console = get_console()


def _open(file: Path, json_output: bool = False) -> ImportEditor:
    try:
        return ImportEditor(get_workspace(), str(file))
    except FlatmorphError as e:
        fail(e, json_output)


@app.command("list")
def list_cmd(
    file: Path = typer.Argument(..., help="JS/TS source file", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the import declarations of a file.
    """
    imports = _open(file, json_output).get_imports()

    if json_output:
        print_json([info.model_dump(exclude_none=True) for info in imports])
        return

    table = Table(title=str(file))
    table.add_column("module")
    table.add_column("bindings")
    for info in imports:
        bindings = []
        for spec in info.specifiers:
            label = f"{spec.name} as {spec.alias}" if spec.alias else spec.name
            bindings.append(f"{label} ({spec.type})")
        table.add_row(info.module, ", ".join(bindings) or "(side effect)")
    console.print(table)

    for info in imports:
        names = " ".join(spec.alias or spec.name for spec in info.specifiers)
        console.print(f"{info.module} {names}".rstrip())


@app.command("ensure")
def ensure_cmd(
    file: Path = typer.Argument(..., help="JS/TS source file", exists=True, dir_okay=False),
    name: str = typer.Argument(..., help="Imported name (ignored for --kind full)"),
    module: str = typer.Argument(..., help="Module specifier"),
    kind: ImportKind = typer.Option(ImportKind.NAMED, "--kind", "-k", help="Import kind"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing"),
):
    """
    Ensure an import exists, adding it when missing.
    """
    editor = _open(file)
    editor.ensure_import(name, module, kind)
    finish(editor, dry_run, f"Ensured {kind.value} import {name or module} from {module}")


@app.command("remove")
def remove_cmd(
    file: Path = typer.Argument(..., help="JS/TS source file", exists=True, dir_okay=False),
    name: str = typer.Argument(..., help="Imported name or alias"),
    module: str = typer.Argument(..., help="Module specifier"),
    kind: ImportKind = typer.Option(ImportKind.NAMED, "--kind", "-k", help="Import kind"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing"),
):
    """
    Remove an import binding; the declaration goes once it binds nothing.
    """
    editor = _open(file)
    editor.remove_import(name, module, kind)
    finish(editor, dry_run, f"Removed {kind.value} import {name or module} from {module}")
