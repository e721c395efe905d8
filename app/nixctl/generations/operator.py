"""Generation deletion operator.

Deletes generations from a Nix profile with nix-env and runs the
follow-up housekeeping: boot menu regeneration and garbage collection.
"""

import logging
import os
import subprocess
from dataclasses import dataclass

from nixctl.core.paths import CURRENT_SYSTEM, SYSTEM_PROFILE, get_profile_path
from nixctl.models.generation import Generation
from nixctl.utils.shell import run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result of a single operator step.

    Attributes:
        step: Short name of the step (e.g., 'delete', 'boot', 'gc').
        success: Whether the step completed successfully.
        message: Optional success message or additional information.
        error: Error message if the step failed, None otherwise.
    """

    step: str
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class DeletionResult(OperationResult):
    """Result of deleting generations from a profile.

    Attributes:
        numbers: Generation numbers passed to nix-env.
    """

    numbers: tuple[int, ...] = ()


class GenerationOperator:
    """Executes generation deletion for a Nix profile.

    Privileged commands are prefixed with the configured root command
    unless the process already runs as root.

    Attributes:
        dry_run: If True, report what would run without executing anything.
    """

    # nix-store --gc can take a long time on large stores
    _GC_TIMEOUT: float = 3600.0
    _TIMEOUT: float = 300.0

    def __init__(
        self,
        profile: str = SYSTEM_PROFILE,
        root_command: str = "sudo",
        dry_run: bool = False,
    ) -> None:
        """Initialize the GenerationOperator.

        Args:
            profile: Profile to delete generations from.
            root_command: Privilege escalation command, empty to disable.
            dry_run: If True, report what would run without executing anything.
        """
        self._profile = profile
        self._root_command = root_command
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def delete(self, generations: list[Generation]) -> DeletionResult:
        """Delete generations from the profile.

        Args:
            generations: Generations to delete.

        Returns:
            DeletionResult describing the nix-env invocation.
        """
        numbers = tuple(g.number for g in generations)
        if not numbers:
            return DeletionResult(step="delete", success=True, message="Nothing to delete")

        args = [
            "nix-env",
            "--profile",
            str(get_profile_path(self._profile)),
            "--delete-generations",
            *(str(n) for n in numbers),
        ]
        result = self._run("delete", args, self._TIMEOUT)
        return DeletionResult(
            step=result.step,
            success=result.success,
            message=result.message,
            error=result.error,
            numbers=numbers,
        )

    def regenerate_boot_menu(self) -> OperationResult:
        """Rebuild the boot menu so deleted generations disappear from it.

        Returns:
            OperationResult for the switch-to-configuration invocation.
        """
        args = [str(CURRENT_SYSTEM / "bin" / "switch-to-configuration"), "boot"]
        return self._run("boot", args, self._TIMEOUT)

    def collect_garbage(self) -> OperationResult:
        """Remove store paths no longer referenced by any generation.

        Returns:
            OperationResult for the nix-store invocation.
        """
        return self._run("gc", ["nix-store", "--gc"], self._GC_TIMEOUT)

    def _privileged(self, args: list[str]) -> list[str]:
        if not self._root_command or os.geteuid() == 0:
            return args
        return [self._root_command, *args]

    def _run(self, step: str, args: list[str], timeout: float) -> OperationResult:
        """Run a privileged command and capture its outcome."""
        argv = self._privileged(args)
        command_line = " ".join(argv)

        if self._dry_run:
            logger.info("[dry-run] Would execute: %s", command_line)
            return OperationResult(step=step, success=True, message=f"[dry-run] {command_line}")

        logger.info("Executing: %s", command_line)
        try:
            result = run_command(argv, timeout=timeout)
        except FileNotFoundError:
            return OperationResult(step=step, success=False, error=f"Command not found: {argv[0]}")
        except subprocess.TimeoutExpired:
            return OperationResult(
                step=step,
                success=False,
                error=f"Command timed out after {timeout:.0f}s: {command_line}",
            )

        if result.success:
            return OperationResult(step=step, success=True, message=result.stdout.strip() or None)

        logger.error("%s failed: %s", command_line, result.error_message)
        return OperationResult(step=step, success=False, error=result.error_message)
