"""Logging configuration for the nixctl CLI."""

import logging

from rich.logging import RichHandler

from nixctl.utils.formatting import err_console


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to the stderr console.

    Warnings are shown by default, debug output with ``verbose`` and only
    errors with ``quiet``.

    Args:
        verbose: Enable debug logging.
        quiet: Only show errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=err_console,
                rich_tracebacks=True,
                show_time=verbose,
                show_path=False,
            )
        ],
        force=True,
    )
