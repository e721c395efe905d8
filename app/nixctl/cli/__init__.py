"""CLI package for nixctl.

This package contains the Typer application and all subcommands.
"""

from nixctl.cli.main import app

__all__ = ["app"]
