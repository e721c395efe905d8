"""Unit tests for generation models.

Tests for the Generation and DeleteConstraints data structures.
"""

from datetime import UTC, datetime, timedelta

import pytest
from nixctl.models.generation import DeleteConstraints, Generation

CREATED = datetime(2026, 1, 26, 14, 30, tzinfo=UTC)


class TestGeneration:
    """Tests for Generation dataclass."""

    def test_create_generation(self) -> None:
        """Can create a generation with required fields."""
        gen = Generation(number=42, creation_date=CREATED)

        assert gen.number == 42
        assert gen.is_current is False
        assert gen.nixos_version == ""
        assert gen.specialisations == ()

    def test_generation_is_frozen(self) -> None:
        """Generation is immutable."""
        gen = Generation(number=1, creation_date=CREATED)
        with pytest.raises(AttributeError):
            gen.number = 2  # type: ignore[misc]

    @pytest.mark.parametrize("number", [0, -3])
    def test_non_positive_number_raises(self, number: int) -> None:
        """Generation numbers must be positive."""
        with pytest.raises(ValueError, match="must be positive"):
            Generation(number=number, creation_date=CREATED)

    def test_to_dict(self) -> None:
        """to_dict serializes all fields."""
        gen = Generation(
            number=3,
            creation_date=CREATED,
            is_current=True,
            nixos_version="24.05.20240101.abcdef0",
            nixpkgs_revision="abcdef0123456789",
            kernel_version="6.6.10",
            specialisations=("gaming", "work"),
        )

        data = gen.to_dict()

        assert data["number"] == 3
        assert data["creation_date"] == "2026-01-26T14:30:00+00:00"
        assert data["is_current"] is True
        assert data["nixos_version"] == "24.05.20240101.abcdef0"
        assert data["kernel_version"] == "6.6.10"
        assert data["specialisations"] == ["gaming", "work"]
        assert data["description"] == ""


class TestDeleteConstraints:
    """Tests for DeleteConstraints dataclass."""

    def test_defaults_select_nothing(self) -> None:
        """Default constraints are all unset."""
        constraints = DeleteConstraints()

        assert constraints.all is False
        assert constraints.has_bounds is False
        assert constraints.older_than is None
        assert constraints.remove == frozenset()
        assert constraints.keep == frozenset()
        assert constraints.minimum_to_keep == 0

    def test_accepts_iterables(self) -> None:
        """Explicit number collections are stored as frozensets."""
        constraints = DeleteConstraints(remove=[1, 2, 2], keep=(5,))  # type: ignore[arg-type]

        assert constraints.remove == frozenset({1, 2})
        assert constraints.keep == frozenset({5})

    @pytest.mark.parametrize(
        ("lower", "upper", "expected"),
        [(None, None, False), (0, 0, False), (3, None, True), (None, 7, True)],
    )
    def test_has_bounds(self, lower: int | None, upper: int | None, expected: bool) -> None:
        """has_bounds treats None and 0 as unset."""
        constraints = DeleteConstraints(lower_bound=lower, upper_bound=upper)

        assert constraints.has_bounds is expected

    def test_negative_bound_raises(self) -> None:
        """Negative bounds are rejected."""
        with pytest.raises(ValueError, match="lower_bound cannot be negative"):
            DeleteConstraints(lower_bound=-1)

    def test_negative_minimum_raises(self) -> None:
        """A negative retention floor is rejected."""
        with pytest.raises(ValueError, match="minimum_to_keep"):
            DeleteConstraints(minimum_to_keep=-1)

    def test_negative_duration_raises(self) -> None:
        """A negative age cutoff is rejected."""
        with pytest.raises(ValueError, match="older_than"):
            DeleteConstraints(older_than=timedelta(hours=-1))
