"""Access to generations stored in Nix profiles.

This package contains the profile scanner, which enumerates generations,
and the generation operator, which deletes them.
"""

from nixctl.generations.operator import DeletionResult, GenerationOperator, OperationResult
from nixctl.generations.scanner import ProfileScanError, ProfileScanner

__all__ = [
    "DeletionResult",
    "GenerationOperator",
    "OperationResult",
    "ProfileScanError",
    "ProfileScanner",
]
