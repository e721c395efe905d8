"""Unit tests for the profile scanner.

Tests build fake profile directories under tmp_path.
"""

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path

import pytest
from nixctl.generations.scanner import ProfileScanError, ProfileScanner


def _make_generation(
    profile_dir: Path,
    number: int,
    profile: str = "system",
    manifest: dict[str, str] | None = None,
) -> Path:
    """Create a fake generation directory."""
    path = profile_dir / f"{profile}-{number}-link"
    path.mkdir()
    if manifest is not None:
        (path / "nixos-version.json").write_text(json.dumps(manifest))
    return path


@pytest.fixture
def profile_dir(tmp_path: Path) -> Path:
    """Profile directory with generations 1, 2 and 10, 2 being current."""
    _make_generation(tmp_path, 1, manifest={"nixosVersion": "23.11.1"})
    gen2 = _make_generation(
        tmp_path,
        2,
        manifest={
            "nixosVersion": "24.05.2",
            "nixpkgsRevision": "abcdef0123456789",
            "configurationRevision": "1234567",
            "description": "laptop rebuild",
        },
    )
    (gen2 / "kernel-modules" / "lib" / "modules" / "6.6.10").mkdir(parents=True)
    (gen2 / "specialisation" / "work").mkdir(parents=True)
    (gen2 / "specialisation" / "gaming").mkdir()
    # Set after populating, creating entries updates the directory mtime
    created = datetime(2026, 1, 26, 14, 30, tzinfo=UTC).timestamp()
    os.utime(gen2, (created, created))
    _make_generation(tmp_path, 10, manifest={"nixosVersion": "24.05.3"})
    os.symlink("system-2-link", tmp_path / "system")
    return tmp_path


class TestProfileScanner:
    """Tests for ProfileScanner.scan."""

    def test_scan_sorted_ascending(self, profile_dir: Path) -> None:
        """Generations are returned by ascending number, not name order."""
        generations = ProfileScanner("system", profile_dir=profile_dir).scan()

        assert [g.number for g in generations] == [1, 2, 10]

    def test_marks_current_generation(self, profile_dir: Path) -> None:
        """The profile link target is the current generation."""
        generations = ProfileScanner("system", profile_dir=profile_dir).scan()

        assert [g.number for g in generations if g.is_current] == [2]

    def test_reads_metadata(self, profile_dir: Path) -> None:
        """Version manifest, kernel and specialisations are read."""
        generations = ProfileScanner("system", profile_dir=profile_dir).scan()
        gen = generations[1]

        assert gen.nixos_version == "24.05.2"
        assert gen.nixpkgs_revision == "abcdef0123456789"
        assert gen.configuration_revision == "1234567"
        assert gen.description == "laptop rebuild"
        assert gen.kernel_version == "6.6.10"
        assert gen.specialisations == ("gaming", "work")
        assert gen.creation_date == datetime(2026, 1, 26, 14, 30, tzinfo=UTC)

    def test_missing_metadata_left_empty(self, profile_dir: Path) -> None:
        """Generations without kernel or specialisations have empty fields."""
        gen = ProfileScanner("system", profile_dir=profile_dir).scan()[0]

        assert gen.kernel_version == ""
        assert gen.specialisations == ()
        assert gen.description == ""

    def test_falls_back_to_version_file(self, tmp_path: Path) -> None:
        """The plain nixos-version file is used without a manifest."""
        gen_path = _make_generation(tmp_path, 1)
        (gen_path / "nixos-version").write_text("22.11.99\n")

        gen = ProfileScanner("system", profile_dir=tmp_path).scan()[0]

        assert gen.nixos_version == "22.11.99"

    def test_corrupt_manifest_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A corrupt manifest is reported and ignored."""
        gen_path = _make_generation(tmp_path, 1)
        (gen_path / "nixos-version.json").write_text("{not json")

        with caplog.at_level(logging.WARNING):
            gen = ProfileScanner("system", profile_dir=tmp_path).scan()[0]

        assert gen.nixpkgs_revision == ""
        assert "nixos-version.json" in caplog.text

    def test_ignores_unrelated_entries(self, profile_dir: Path) -> None:
        """Only '<profile>-<N>-link' entries are generations."""
        (profile_dir / "work-5-link").mkdir()
        (profile_dir / "system-abc-link").mkdir()
        (profile_dir / "per-user").mkdir()

        generations = ProfileScanner("system", profile_dir=profile_dir).scan()

        assert [g.number for g in generations] == [1, 2, 10]

    def test_named_profile(self, tmp_path: Path) -> None:
        """Named profiles match their own link prefix."""
        _make_generation(tmp_path, 4, profile="work")
        _make_generation(tmp_path, 5, profile="work")
        _make_generation(tmp_path, 1, profile="system")
        os.symlink("work-5-link", tmp_path / "work")

        generations = ProfileScanner("work", profile_dir=tmp_path).scan()

        assert [(g.number, g.is_current) for g in generations] == [(4, False), (5, True)]

    def test_missing_current_link_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Without a profile link no generation is current."""
        _make_generation(tmp_path, 1)

        with caplog.at_level(logging.WARNING):
            generations = ProfileScanner("system", profile_dir=tmp_path).scan()

        assert not any(g.is_current for g in generations)
        assert "Unable to determine current generation" in caplog.text

    def test_missing_profile_dir(self, tmp_path: Path) -> None:
        """An unreadable profile directory raises ProfileScanError."""
        scanner = ProfileScanner("system", profile_dir=tmp_path / "missing")

        with pytest.raises(ProfileScanError, match="Cannot read profile directory"):
            scanner.scan()

    def test_generation_path(self, tmp_path: Path) -> None:
        """generation_path builds the link name from profile and number."""
        scanner = ProfileScanner("work", profile_dir=tmp_path)

        assert scanner.generation_path(7) == tmp_path / "work-7-link"
        assert scanner.profile_path == tmp_path / "work"
