"""Core logic for nixctl: generation resolution, settings and paths."""
