"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from datetime import UTC, datetime, timedelta

import pytest
from nixctl.models.generation import Generation


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for age-based resolution."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def three_generations(now: datetime) -> list[Generation]:
    """Generations 1 (48h old), 2 (just over 24h old) and 3 (current)."""
    return [
        Generation(number=1, creation_date=now - timedelta(hours=48)),
        Generation(number=2, creation_date=now - timedelta(hours=24, minutes=1)),
        Generation(number=3, creation_date=now, is_current=True),
    ]


@pytest.fixture
def ten_generations(now: datetime) -> list[Generation]:
    """Generations 1-10, one per day, with 10 current and 10 the newest."""
    return [
        Generation(
            number=n,
            creation_date=now - timedelta(days=10 - n),
            is_current=n == 10,
        )
        for n in range(1, 11)
    ]
