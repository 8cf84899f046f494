import typer

from flatmorph import __version__
from flatmorph.logging_config import reset_logging, setup_logging
from flatmorph.cli import eslint, imports
from flatmorph.cli.config import CLIConfig

app = typer.Typer()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables and colors (also via FLATMORPH_HUMAN_MODE env var)"
    ),
):
    """
    Flatmorph: structure-preserving edits of ESLint flat configs and imports.

    Machine mode is the default (plain output). Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
    elif CLIConfig.is_machine_mode():
        # Reconfigure: the import-time setup may have added a console sink
        reset_logging()
        setup_logging(suppress_console=True)


app.add_typer(eslint.app, name="eslint", help="ESLint flat config commands (list, add-rule, remove-rule)")
app.add_typer(imports.app, name="imports", help="Import declaration commands (list, ensure, remove)")


@app.command()
def version():
    """
    Prints the current version of flatmorph.
    """
    typer.echo(f"flatmorph v{__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
