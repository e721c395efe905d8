"""Path management for nixctl.

This module provides the XDG-compliant location of the configuration file
and the well-known locations of Nix profiles on a NixOS system.

XDG defaults:
- Config: ~/.config/nixctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "nixctl"

# Environment variable overriding the settings file location
CONFIG_ENV_VAR = "NIXCTL_CONFIG"

NIX_PROFILE_DIR = Path("/nix/var/nix/profiles")
NIX_SYSTEM_PROFILE_DIR = NIX_PROFILE_DIR / "system-profiles"
CURRENT_SYSTEM = Path("/run/current-system")

SYSTEM_PROFILE = "system"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/nixctl/ (or XDG_CONFIG_HOME/nixctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the settings file path.

    The NIXCTL_CONFIG environment variable takes precedence over the
    XDG location.

    Returns:
        Path to the settings TOML file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "config.toml"


def get_profile_dir(profile: str = SYSTEM_PROFILE) -> Path:
    """Get the directory holding the generation links of a profile.

    The system profile lives directly in /nix/var/nix/profiles, while
    named system profiles live in its system-profiles subdirectory.

    Args:
        profile: Profile name.

    Returns:
        Directory containing '<profile>-<N>-link' entries.
    """
    if profile == SYSTEM_PROFILE:
        return NIX_PROFILE_DIR
    return NIX_SYSTEM_PROFILE_DIR


def get_profile_path(profile: str = SYSTEM_PROFILE) -> Path:
    """Get the path of the profile link itself.

    Args:
        profile: Profile name.

    Returns:
        Path to the profile symlink pointing at the current generation.
    """
    return get_profile_dir(profile) / profile


def validate_profile_name(profile: str) -> str:
    """Ensure a profile name names an entry inside the profile directory.

    Args:
        profile: Profile name.

    Returns:
        The unchanged profile name.

    Raises:
        ValueError: If the name is empty or would escape the profile directory.
    """
    if not profile or "/" in profile or profile in (".", ".."):
        msg = f"invalid profile name '{profile}'"
        raise ValueError(msg)
    return profile
