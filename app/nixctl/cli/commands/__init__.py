"""CLI commands for nixctl.

This package contains all subcommand implementations.
"""

from nixctl.cli.commands import generation

__all__ = ["generation"]
