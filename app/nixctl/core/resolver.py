"""Resolution of generations to delete.

This module turns a set of possibly overlapping deletion constraints into
the exact list of generations to remove. Resolution is a pure computation:
it performs no I/O and never mutates its inputs.

Precedence, from lowest to highest:
1. Explicit removals, range and age selections (or ``all``) are unioned.
2. Explicit keeps and the current generation are subtracted.
3. The minimum-retention floor restores the newest generations.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from nixctl.models.generation import DeleteConstraints, Generation

logger = logging.getLogger(__name__)


class GenerationResolveError(Exception):
    """Base exception for generation resolution errors."""


class NoGenerationsExistError(GenerationResolveError):
    """Raised when the profile contains no generations."""

    def __init__(self) -> None:
        super().__init__("no generations exist in profile")


class OnlyOneGenerationError(GenerationResolveError):
    """Raised when the only generation present is the current one."""

    def __init__(self) -> None:
        super().__init__(
            "only one generation exists in profile, cannot delete the current generation"
        )


class MinimumExceedsAvailableError(GenerationResolveError):
    """Raised when the retention floor is not below the generation count.

    Attributes:
        requested: Minimum number of generations the user asked to keep.
        available: Number of generations present.
    """

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"cannot keep {requested} generations, there are only {available} available"
        )


class InvalidBoundsError(GenerationResolveError):
    """Raised when the lower bound of a range exceeds the upper bound.

    Attributes:
        lower: Resolved lower bound.
        upper: Resolved upper bound.
    """

    def __init__(self, lower: int, upper: int) -> None:
        self.lower = lower
        self.upper = upper
        super().__init__(f"lower bound '{lower}' must be less than upper bound '{upper}'")


class BoundOutOfRangeError(GenerationResolveError):
    """Raised when a range bound lies outside the available generations.

    Attributes:
        bound: The offending bound.
    """

    def __init__(self, bound: int) -> None:
        self.bound = bound
        super().__init__(f"bound '{bound}' is not within the range of available generations")


class NoneResolvedError(GenerationResolveError):
    """Raised when valid constraints select no generation at all."""

    def __init__(self) -> None:
        super().__init__("no generations were resolved for deletion from the given parameters")


def resolve_generations_to_delete(
    generations: Sequence[Generation],
    constraints: DeleteConstraints,
    now: datetime | None = None,
) -> list[Generation]:
    """Compute the generations to delete for the given constraints.

    Args:
        generations: All generations of a profile, in any order.
        constraints: User-supplied selection and retention constraints.
        now: Reference time for ``older_than``. Defaults to the current UTC time.

    Returns:
        Generations to delete, sorted ascending by number.

    Raises:
        NoGenerationsExistError: If ``generations`` is empty.
        OnlyOneGenerationError: If only one generation exists.
        MinimumExceedsAvailableError: If ``minimum_to_keep`` is not below the total.
        InvalidBoundsError: If the resolved lower bound exceeds the upper bound.
        BoundOutOfRangeError: If a bound lies outside the available numbers.
        NoneResolvedError: If nothing was selected for deletion.
        RuntimeError: If no generation is marked current. This is a caller
            bug and must not be handled as a user error.
    """
    total = len(generations)
    if total == 0:
        raise NoGenerationsExistError()

    current = next((g for g in generations if g.is_current), None)
    if current is None:
        msg = "current generation not found, this is a bug"
        raise RuntimeError(msg)

    if total == 1:
        raise OnlyOneGenerationError()

    minimum = constraints.minimum_to_keep
    if minimum > 0 and minimum >= total:
        raise MinimumExceedsAvailableError(requested=minimum, available=total)

    by_number = {g.number: g for g in generations}
    known = set(by_number)
    lowest = min(known)
    highest = max(known)

    to_keep = set(constraints.keep)
    to_keep.add(current.number)

    unknown = constraints.remove - known
    if unknown:
        logger.warning(
            "Ignoring generations that do not exist: %s",
            ", ".join(str(n) for n in sorted(unknown)),
        )
    to_remove = set(constraints.remove & known)

    if constraints.all:
        to_remove.update(by_number)
    else:
        if constraints.has_bounds:
            upper = constraints.upper_bound or highest
            lower = constraints.lower_bound or lowest

            if lower > upper:
                raise InvalidBoundsError(lower=lower, upper=upper)
            if not lowest <= upper <= highest:
                raise BoundOutOfRangeError(upper)
            if not lowest <= lower <= highest:
                raise BoundOutOfRangeError(lower)

            to_remove.update(n for n in by_number if lower <= n <= upper)

        if constraints.older_than is not None:
            reference = now if now is not None else datetime.now(UTC)
            try:
                cutoff = reference - constraints.older_than
            except OverflowError:
                # Reaches back past year 1, no generation is that old
                cutoff = datetime.min.replace(tzinfo=UTC)
            to_remove.update(g.number for g in generations if g.creation_date < cutoff)

    to_remove -= to_keep

    if minimum > 0 and total - len(to_remove) < minimum:
        logger.debug(
            "Restoring generations to keep a minimum of %d (%d selected)",
            minimum,
            len(to_remove),
        )
        for number in sorted(by_number, reverse=True):
            to_remove.discard(number)
            if total - len(to_remove) == minimum:
                break

    if not to_remove:
        raise NoneResolvedError()

    logger.debug("Resolved generations for deletion: %s", sorted(to_remove))
    return [by_number[n] for n in sorted(to_remove)]
