"""Profile scanner for NixOS generations.

Enumerates the '<profile>-<N>-link' entries of a Nix profile directory and
reads the metadata each generation carries.
"""

import json
import logging
import os
import re
from datetime import UTC, datetime
from pathlib import Path

from nixctl.core.paths import SYSTEM_PROFILE, get_profile_dir
from nixctl.models.generation import Generation

logger = logging.getLogger(__name__)


class ProfileScanError(Exception):
    """Raised when the generations of a profile cannot be enumerated."""


class ProfileScanner:
    """Scanner for the generations of a single Nix profile.

    Example:
        >>> scanner = ProfileScanner("system")
        >>> for gen in scanner.scan():
        ...     print(gen.number, gen.is_current)
    """

    VERSION_MANIFEST = "nixos-version.json"
    VERSION_FILE = "nixos-version"

    def __init__(self, profile: str = SYSTEM_PROFILE, profile_dir: Path | None = None) -> None:
        """Initialize ProfileScanner.

        Args:
            profile: Profile name.
            profile_dir: Optional override for the directory containing the
                generation links. Default depends on the profile name.
        """
        self._profile = profile
        self._profile_dir = profile_dir if profile_dir is not None else get_profile_dir(profile)
        self._link_pattern = re.compile(rf"^{re.escape(profile)}-(\d+)-link$")

    @property
    def profile(self) -> str:
        """Name of the scanned profile."""
        return self._profile

    @property
    def profile_path(self) -> Path:
        """Path of the profile symlink pointing at the current generation."""
        return self._profile_dir / self._profile

    def generation_path(self, number: int) -> Path:
        """Get the link path of a generation.

        Args:
            number: Generation number.

        Returns:
            Path to '<profile>-<number>-link'.
        """
        return self._profile_dir / f"{self._profile}-{number}-link"

    def scan(self) -> list[Generation]:
        """Collect all generations of the profile.

        Returns:
            Generations sorted ascending by number.

        Raises:
            ProfileScanError: If the profile directory cannot be read.
        """
        try:
            entries = sorted(os.listdir(self._profile_dir))
        except OSError as e:
            msg = f"Cannot read profile directory {self._profile_dir}: {e}"
            raise ProfileScanError(msg) from e

        current_link = self._read_current_link()

        generations: list[Generation] = []
        for name in entries:
            match = self._link_pattern.match(name)
            if match is None:
                continue
            number = int(match.group(1))
            if number < 1:
                logger.warning("Skipping invalid generation link %s", name)
                continue
            generations.append(self._read_generation(number, is_current=name == current_link))

        generations.sort(key=lambda g: g.number)
        logger.debug("Found %d generations in profile %s", len(generations), self._profile)
        return generations

    def _read_current_link(self) -> str | None:
        """Read the name of the generation link the profile points at."""
        try:
            return os.path.basename(os.readlink(self.profile_path))
        except OSError as e:
            logger.warning("Unable to determine current generation: %s", e)
            return None

    def _read_generation(self, number: int, is_current: bool) -> Generation:
        """Read the metadata of a single generation.

        Missing or unreadable metadata is logged and leaves the
        corresponding field empty.
        """
        path = self.generation_path(number)

        manifest = self._read_manifest(path)
        nixos_version = manifest.get("nixosVersion", "")
        if not nixos_version:
            nixos_version = self._read_text(path / self.VERSION_FILE)

        return Generation(
            number=number,
            creation_date=self._read_creation_date(path),
            is_current=is_current,
            nixos_version=nixos_version,
            nixpkgs_revision=manifest.get("nixpkgsRevision", ""),
            configuration_revision=manifest.get("configurationRevision", ""),
            description=manifest.get("description", ""),
            kernel_version=self._read_kernel_version(path),
            specialisations=self._read_specialisations(path),
        )

    def _read_manifest(self, path: Path) -> dict[str, str]:
        """Read nixos-version.json, keeping only string values."""
        manifest_path = path / self.VERSION_MANIFEST
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug("No version manifest at %s", manifest_path)
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read %s: %s", manifest_path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Invalid version manifest %s", manifest_path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.warning("Failed to read %s: %s", path, e)
            return ""

    def _read_creation_date(self, path: Path) -> datetime:
        """Creation date of a generation, taken from its link."""
        try:
            mtime = path.lstat().st_mtime
        except OSError as e:
            logger.warning("Failed to stat %s: %s", path, e)
            mtime = 0.0
        return datetime.fromtimestamp(mtime, UTC)

    def _read_kernel_version(self, path: Path) -> str:
        modules = sorted((path / "kernel-modules" / "lib" / "modules").glob("*"))
        if not modules:
            logger.debug("No kernel modules directory found in %s", path)
            return ""
        return modules[0].name

    def _read_specialisations(self, path: Path) -> tuple[str, ...]:
        return tuple(sorted(p.name for p in (path / "specialisation").glob("*")))
