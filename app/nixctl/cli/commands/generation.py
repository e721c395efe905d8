"""Generation commands for listing and deleting generations.

This module provides the `nixctl generation` command group with its
`list` and `delete` subcommands.
"""

import json
from typing import Annotated

import typer
from rich.markup import escape

from nixctl.cli.display import create_generations_table, create_results_table
from nixctl.core.paths import validate_profile_name
from nixctl.core.resolver import (
    GenerationResolveError,
    MinimumExceedsAvailableError,
    NoneResolvedError,
    resolve_generations_to_delete,
)
from nixctl.core.settings import Settings
from nixctl.core.timespan import TimeSpanError, parse_time_span
from nixctl.generations.operator import GenerationOperator, OperationResult
from nixctl.generations.scanner import ProfileScanError, ProfileScanner
from nixctl.models.generation import DeleteConstraints, Generation
from nixctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    name="generation",
    help="Manage NixOS generations.",
    no_args_is_help=True,
)


def _validate_profile(value: str | None) -> str | None:
    """Reject --profile values that would escape the profile directory."""
    if value is None:
        return None
    try:
        return validate_profile_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.callback()
def generation(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option(
            "--profile",
            "-p",
            callback=_validate_profile,
            help="Profile to operate on (default from settings, usually 'system').",
        ),
    ] = None,
) -> None:
    """Manage NixOS generations."""
    ctx.ensure_object(dict)
    settings = _get_settings(ctx)
    ctx.obj["profile"] = profile or settings.generation.profile


def _get_settings(ctx: typer.Context) -> Settings:
    """Get settings loaded by the main callback, or defaults."""
    settings = (ctx.obj or {}).get("settings")
    if settings is None:
        return Settings()
    return settings


def _load_generations(profile: str) -> list[Generation]:
    """Scan the generations of a profile, exiting on failure.

    Args:
        profile: Profile name.

    Returns:
        Generations sorted ascending by number.
    """
    try:
        return ProfileScanner(profile).scan()
    except ProfileScanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command("list")
def list_generations(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List all generations in a profile and their details.

    Examples:
        nixctl generation list
        nixctl generation -p work list --json
    """
    profile: str = ctx.obj["profile"]
    generations = _load_generations(profile)

    if json_output:
        output = [g.to_dict() for g in reversed(generations)]
        console.print_json(json.dumps(output))
        return

    if not generations:
        print_info(f"No generations found in profile '{profile}'.")
        return

    table = create_generations_table(list(reversed(generations)), title=f"Generations ({profile})")
    console.print(table)


def _validate_time_span(value: str | None) -> str | None:
    """Reject --older-than values that are not valid time spans."""
    if value is None:
        return None
    try:
        parse_time_span(value)
    except TimeSpanError as e:
        raise typer.BadParameter(str(e)) from e
    return value


@app.command("delete")
def delete_generations(
    ctx: typer.Context,
    remove: Annotated[
        list[int] | None,
        typer.Argument(
            metavar="[GEN]...",
            help="Generation numbers to delete.",
            min=1,
            show_default=False,
        ),
    ] = None,
    all_: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Delete all generations except the current one.",
        ),
    ] = False,
    lower_bound: Annotated[
        int | None,
        typer.Option(
            "--from",
            "-f",
            metavar="GEN",
            min=1,
            help="Delete all generations after GEN, inclusive.",
        ),
    ] = None,
    upper_bound: Annotated[
        int | None,
        typer.Option(
            "--to",
            "-t",
            metavar="GEN",
            min=1,
            help="Delete all generations until GEN, inclusive.",
        ),
    ] = None,
    minimum: Annotated[
        int,
        typer.Option(
            "--min",
            "-m",
            metavar="NUM",
            min=0,
            help="Keep a minimum of NUM generations.",
        ),
    ] = 0,
    older_than: Annotated[
        str | None,
        typer.Option(
            "--older-than",
            "-o",
            metavar="PERIOD",
            callback=_validate_time_span,
            help="Delete all generations older than PERIOD (systemd.time span, e.g. '30d 2h').",
        ),
    ] = None,
    keep: Annotated[
        list[int] | None,
        typer.Option(
            "--keep",
            "-k",
            metavar="GEN",
            min=1,
            help="Always keep GEN, can be specified many times.",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Automatically confirm generation deletion.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be deleted without executing.",
        ),
    ] = False,
) -> None:
    """Delete generations from a profile.

    Options and arguments can be combined ad-hoc as constraints. Generations
    passed with --keep and the current generation are never deleted.

    Examples:
        nixctl generation delete 12 13         # Delete generations 12 and 13
        nixctl generation delete --all -k 40   # Delete all but 40 and current
        nixctl generation delete -o 30d -m 5   # Older than 30 days, keep 5
        nixctl generation delete -f 10 -t 20 --dry-run
    """
    settings = _get_settings(ctx)
    profile: str = ctx.obj["profile"]

    constraints = DeleteConstraints(
        all=all_,
        lower_bound=lower_bound,
        upper_bound=upper_bound,
        older_than=parse_time_span(older_than) if older_than is not None else None,
        remove=frozenset(remove or []),
        keep=frozenset(keep or []),
        minimum_to_keep=minimum,
    )

    generations = _load_generations(profile)

    try:
        to_delete = resolve_generations_to_delete(generations, constraints)
    except MinimumExceedsAvailableError as e:
        print_error(str(e))
        print_info("All generations will be kept.")
        raise typer.Exit(code=1) from e
    except NoneResolvedError as e:
        print_error(str(e))
        print_info("Nothing to do.")
        raise typer.Exit(code=1) from e
    except GenerationResolveError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(create_generations_table(to_delete, title="Generations To Delete"))
    console.print(f"\nSummary: [removed]{len(to_delete)} to delete[/removed]")

    if not (dry_run or yes or settings.no_confirm):
        confirmed = typer.confirm(f"Delete {len(to_delete)} generation(s)?", default=False)
        if not confirmed:
            print_info("Cancelled.")
            raise typer.Exit(code=0)

    operator = GenerationOperator(
        profile=profile,
        root_command=settings.root_command,
        dry_run=dry_run,
    )
    results = _execute_deletion(operator, to_delete, settings.generation.collect_garbage)

    console.print(create_results_table(results))

    if results[0].failed:
        print_error("Failed to delete generations.")
        raise typer.Exit(code=1)

    if dry_run:
        print_info(r"\[dry-run] No changes made.")
        return

    print_success(f"Deleted {len(to_delete)} generation(s).")


def _execute_deletion(
    operator: GenerationOperator,
    generations: list[Generation],
    collect_garbage: bool,
) -> list[OperationResult]:
    """Delete generations and run housekeeping.

    Housekeeping only runs when the deletion itself succeeded. Failed
    housekeeping steps are reported as warnings.

    Args:
        operator: Operator bound to the profile.
        generations: Generations to delete.
        collect_garbage: Whether to run the garbage collector afterwards.

    Returns:
        Results in execution order, deletion first.
    """
    results: list[OperationResult] = [operator.delete(generations)]
    if results[0].failed:
        return results

    results.append(operator.regenerate_boot_menu())
    if collect_garbage:
        results.append(operator.collect_garbage())

    for result in results[1:]:
        if result.failed:
            error = escape(result.error or "Unknown error")
            print_warning(f"Housekeeping step '{result.step}' failed: {error}")

    return results
