"""Generation models for NixOS profiles.

This module defines the data structures describing a system generation
and the user-supplied constraints used to select generations for deletion.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True, slots=True)
class Generation:
    """A numbered snapshot of a built system configuration.

    Only ``number``, ``creation_date`` and ``is_current`` take part in
    deletion resolution; the remaining fields are descriptive.

    Attributes:
        number: Generation number, unique within a profile.
        creation_date: When the generation was created (timezone-aware).
        is_current: Whether this is the currently active generation.
        nixos_version: NixOS version label (e.g., '24.05.20240101.abcdef').
        nixpkgs_revision: Git revision of nixpkgs used for the build.
        configuration_revision: Revision of the user configuration, if set.
        description: Free-form description recorded at build time.
        kernel_version: Kernel version shipped with this generation.
        specialisations: Sorted names of available specialisations.
    """

    number: int
    creation_date: datetime
    is_current: bool = False
    nixos_version: str = ""
    nixpkgs_revision: str = ""
    configuration_revision: str = ""
    description: str = ""
    kernel_version: str = ""
    specialisations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate generation data after initialization."""
        if self.number < 1:
            msg = f"Generation number must be positive, got {self.number}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output.

        Returns:
            Dictionary representation of the generation.
        """
        return {
            "number": self.number,
            "creation_date": self.creation_date.isoformat(),
            "is_current": self.is_current,
            "nixos_version": self.nixos_version,
            "nixpkgs_revision": self.nixpkgs_revision,
            "configuration_revision": self.configuration_revision,
            "description": self.description,
            "kernel_version": self.kernel_version,
            "specialisations": list(self.specialisations),
        }


@dataclass(frozen=True, slots=True)
class DeleteConstraints:
    """User intent for selecting generations to delete.

    Every field is optional. Unset bounds (None or 0) are open-ended and
    resolve against the lowest/highest generation number present.

    Attributes:
        all: Select every generation except the current one.
        lower_bound: Inclusive lower generation number of a range.
        upper_bound: Inclusive upper generation number of a range.
        older_than: Select generations created before ``now - older_than``.
        remove: Generation numbers to remove explicitly.
        keep: Generation numbers to keep, overriding every other selection.
        minimum_to_keep: Minimum number of generations left after deletion.
    """

    all: bool = False
    lower_bound: int | None = None
    upper_bound: int | None = None
    older_than: timedelta | None = None
    remove: frozenset[int] = field(default_factory=frozenset)
    keep: frozenset[int] = field(default_factory=frozenset)
    minimum_to_keep: int = 0

    def __post_init__(self) -> None:
        """Validate constraint values after initialization."""
        # Accept any iterable of numbers for the explicit sets
        object.__setattr__(self, "remove", frozenset(self.remove))
        object.__setattr__(self, "keep", frozenset(self.keep))

        for name in ("lower_bound", "upper_bound"):
            value = getattr(self, name)
            if value is not None and value < 0:
                msg = f"{name} cannot be negative, got {value}"
                raise ValueError(msg)
        if self.minimum_to_keep < 0:
            msg = f"minimum_to_keep cannot be negative, got {self.minimum_to_keep}"
            raise ValueError(msg)
        if self.older_than is not None and self.older_than < timedelta(0):
            msg = "older_than cannot be a negative duration"
            raise ValueError(msg)

    @property
    def has_bounds(self) -> bool:
        """Check if a generation number range was requested."""
        return bool(self.lower_bound) or bool(self.upper_bound)
