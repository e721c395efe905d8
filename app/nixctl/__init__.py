"""nixctl - Unified system administration for NixOS generations."""

__version__ = "0.1.0"
