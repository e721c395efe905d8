"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from nixctl import __version__
from nixctl.cli.commands import generation
from nixctl.core.log import configure_logging
from nixctl.core.settings import SettingsError, load_settings
from nixctl.utils.formatting import print_error, set_color_enabled

# Create main Typer app
app = typer.Typer(
    name="nixctl",
    help="Unified system administration for NixOS.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"nixctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the settings file.",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """nixctl - Unified system administration for NixOS.

    Inspect and clean up the generations of your NixOS profiles.
    """
    configure_logging(verbose=verbose, quiet=quiet)

    try:
        settings = load_settings(config)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    set_color_enabled(settings.color)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings


# Register commands
app.add_typer(generation.app, name="generation")


if __name__ == "__main__":
    app()
