"""Shared Rich display functions for generations and operator results."""

from rich.markup import escape
from rich.table import Table

from nixctl.generations.operator import OperationResult
from nixctl.models.generation import Generation

DATE_FORMAT = "%Y-%m-%d %H:%M"


def create_generations_table(generations: list[Generation], title: str = "Generations") -> Table:
    """Create a Rich table displaying generations.

    The current generation is highlighted and marked with a filled circle.

    Args:
        generations: Generations to display, in display order.
        title: Table title.

    Returns:
        Rich Table configured for generation display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Number", justify="right", no_wrap=True)
    table.add_column("Date", style="info", no_wrap=True)
    table.add_column("NixOS Version")
    table.add_column("Nixpkgs", style="muted")
    table.add_column("Config", style="muted")
    table.add_column("Kernel", style="muted")
    table.add_column("Specialisations", style="muted")

    for gen in generations:
        if gen.is_current:
            marker = "[current]\u25cf[/]"  # Filled circle
            number = f"[current]{gen.number}[/]"
        else:
            marker = ""
            number = str(gen.number)

        table.add_row(
            marker,
            number,
            gen.creation_date.astimezone().strftime(DATE_FORMAT),
            escape(gen.nixos_version) or "-",
            escape(gen.nixpkgs_revision[:12]) or "-",
            escape(gen.configuration_revision[:12]) or "-",
            escape(gen.kernel_version) or "-",
            escape(", ".join(gen.specialisations)) or "-",
        )

    return table


def create_results_table(results: list[OperationResult]) -> Table:
    """Create a Rich table displaying operator step results.

    Args:
        results: Results of the executed steps.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Step", width=8)
    table.add_column("Message")

    for result in results:
        if result.success:
            status = "[success]OK[/success]"
            message = result.message or ""
        else:
            status = "[error]FAIL[/error]"
            message = result.error or "Unknown error"

        table.add_row(status, result.step, f"[muted]{escape(message)}[/muted]")

    return table
