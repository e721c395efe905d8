"""Settings for nixctl.

This module provides the settings model and the loader for the TOML
settings file, by default ~/.config/nixctl/config.toml.

Example:
    root_command = "doas"
    no_confirm = false

    [generation]
    profile = "system"
    collect_garbage = true
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nixctl.core.paths import SYSTEM_PROFILE, get_settings_path, validate_profile_name

logger = logging.getLogger(__name__)


class GenerationSettings(BaseModel):
    """Settings for the `generation` commands.

    Attributes:
        profile: Profile whose generations are managed by default.
        collect_garbage: Run the Nix garbage collector after deleting generations.
    """

    model_config = ConfigDict(extra="forbid")

    profile: Annotated[
        str,
        Field(min_length=1, description="Default profile name"),
    ] = SYSTEM_PROFILE
    collect_garbage: Annotated[
        bool,
        Field(description="Collect garbage after deleting generations"),
    ] = True

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        """Reject profile names that would escape the profile directory."""
        return validate_profile_name(v)


class Settings(BaseModel):
    """Top-level nixctl settings.

    Attributes:
        root_command: Command used to run privileged operations (e.g. sudo, doas).
        no_confirm: Skip interactive confirmation prompts.
        color: Enable colored output.
        generation: Settings for the `generation` commands.
    """

    model_config = ConfigDict(extra="forbid")

    root_command: Annotated[
        str,
        Field(description="Privilege escalation command"),
    ] = "sudo"
    no_confirm: Annotated[
        bool,
        Field(description="Disable interactive confirmation input"),
    ] = False
    color: Annotated[
        bool,
        Field(description="Enable colored output"),
    ] = True
    generation: GenerationSettings = Field(default_factory=GenerationSettings)

    @field_validator("root_command")
    @classmethod
    def validate_root_command(cls, v: str) -> str:
        """Ensure the root command is a single executable name."""
        v = v.strip()
        if any(c.isspace() for c in v):
            msg = "root_command must not contain whitespace"
            raise ValueError(msg)
        return v


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file is not an error: default settings are returned.

    Args:
        path: Path to the settings file. If None, uses the default location.

    Returns:
        Validated Settings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or its content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e
