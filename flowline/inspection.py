"""Checks that dividers meet the requirements placed on them.

A divider is a callable ``divider(quantity, priorities, distribution)`` that
adds to ``distribution`` how many of ``quantity`` data handlers are given to
each priority, and raises an exception when it cannot do so.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from flowline.divider import MAX_UINT

Divider = Callable[[int, Sequence[int], Dict[int, int]], object]

_HUNDRED_PERCENT = 100
_REFERENCE_FACTOR = 1000


class InspectionError(Exception):
    """Base class of inspection conclusions."""


class DividerFailedError(InspectionError):
    """Divider failed with an error."""


class MonotonicBrokenError(InspectionError):
    """Monotonic is broken."""


class QuantityCalculationFailedError(InspectionError):
    """Failed to calculate total quantity in distribution."""


class QuantityNotFoundError(InspectionError):
    """Failed to find minimum quantity."""


class QuantityNotNonFatalError(InspectionError):
    """Specified quantity is not non-fatal."""


class QuantityNotPreservedError(InspectionError):
    """Total quantity in distribution does not equal to passed quantity."""


class QuantityNotSuitableError(InspectionError):
    """Specified quantity is not suitable."""


class ReferenceBasisCalculationFailedError(InspectionError):
    """Failed to calculate basis of reference distribution."""


class ReferenceDistributionUnfilledError(InspectionError):
    """Reference distribution is not filled."""


@dataclass
class Opts:
    """Options of inspecting.

    quantity is the quantity (or maximum quantity) of data handlers passed to
    the divider; priorities is the list on which the divider is inspected.
    """

    quantity: int
    priorities: List[int] = field(default_factory=list)


@dataclass
class Result:
    """Inspection result; an empty result means a positive conclusion."""

    conclusion: Optional[InspectionError] = None
    err: Optional[BaseException] = None
    quantity: int = 0
    priorities: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the inspection conclusion is positive."""
        return self.conclusion is None


def default_set() -> List[Opts]:
    """Default set of inspecting options."""
    # For this quantity and priority list the error of the distribution in
    # integers does not exceed 10% of the real value for the fair and rate
    # dividers
    return [Opts(quantity=1000, priorities=[10, 9, 8, 7, 6, 5, 4, 3, 2, 1])]


def _every(priorities: Sequence[int]) -> Iterator[List[int]]:
    for size in range(1, len(priorities) + 1):
        for combination in combinations(priorities, size):
            yield list(combination)


def _distributed(priorities: Sequence[int], distribution: Dict[int, int]) -> int:
    total = sum(distribution.get(priority, 0) for priority in priorities)

    if total > MAX_UINT:
        raise OverflowError("total quantity in distribution overflows")

    return total


def _is_filled(priorities: Sequence[int], distribution: Dict[int, int]) -> bool:
    return all(distribution.get(priority, 0) != 0 for priority in priorities)


def _call(
    divider: Divider,
    quantity: int,
    combination: List[int],
    distribution: Dict[int, int],
) -> Optional[Result]:
    # A copy protects the combination against modification by the divider
    try:
        divider(quantity, list(combination), distribution)
    except Exception as exc:  # any divider failure is an inspection finding
        return Result(
            conclusion=DividerFailedError("divider failed with an error"),
            err=exc,
            quantity=quantity,
            priorities=list(combination),
        )

    return None


def is_quantity_preserved(divider: Divider, opts_set: Iterable[Opts]) -> Result:
    """Check that the distribution always holds exactly the passed quantity."""
    for opts in opts_set:
        result = _is_quantity_preserved(divider, opts)
        if not result.ok:
            return result

    return Result()


def _is_quantity_preserved(divider: Divider, opts: Opts) -> Result:
    for combination in _every(opts.priorities):
        for quantity in range(opts.quantity + 1):
            distribution: Dict[int, int] = {}

            failed = _call(divider, quantity, combination, distribution)
            if failed is not None:
                return failed

            try:
                distributed = _distributed(combination, distribution)
            except OverflowError as exc:
                return Result(
                    conclusion=QuantityCalculationFailedError(
                        "failed to calculate total quantity in distribution"
                    ),
                    err=exc,
                    quantity=quantity,
                    priorities=list(combination),
                )

            if distributed != quantity:
                return Result(
                    conclusion=QuantityNotPreservedError(
                        "total quantity in distribution does not equal to passed quantity"
                    ),
                    quantity=quantity,
                    priorities=list(combination),
                )

    return Result()


def is_monotonic(divider: Divider, opts_set: Iterable[Opts]) -> Result:
    """Check that each priority's share never decreases as the quantity grows."""
    for opts in opts_set:
        result = _is_monotonic(divider, opts)
        if not result.ok:
            return result

    return Result()


def _is_monotonic(divider: Divider, opts: Opts) -> Result:
    for combination in _every(opts.priorities):
        previous: Dict[int, int] = {}

        for quantity in range(opts.quantity + 1):
            actual: Dict[int, int] = {}

            failed = _call(divider, quantity, combination, actual)
            if failed is not None:
                return failed

            if any(actual.get(p, 0) < previous.get(p, 0) for p in combination):
                return Result(
                    conclusion=MonotonicBrokenError("monotonic is broken"),
                    quantity=quantity,
                    priorities=list(combination),
                )

            previous = actual

    return Result()


def find_min_non_fatal_quantity(divider: Divider, opts: Opts) -> Tuple[int, Result]:
    """Find the least quantity for which no priority gets zero handlers."""
    for quantity in range(1, opts.quantity + 1):
        params = Opts(quantity=quantity, priorities=opts.priorities)

        if is_non_fatal_quantity(divider, params).ok:
            return quantity, Result()

    return 0, Result(
        conclusion=QuantityNotFoundError("failed to find minimum quantity"),
        quantity=opts.quantity,
        priorities=list(opts.priorities),
    )


def is_non_fatal_quantity(divider: Divider, opts: Opts) -> Result:
    """Check that no priority gets zero handlers for the given quantity."""
    for combination in _every(opts.priorities):
        distribution: Dict[int, int] = {}

        failed = _call(divider, opts.quantity, combination, distribution)
        if failed is not None:
            return failed

        if not _is_filled(combination, distribution):
            return Result(
                conclusion=QuantityNotNonFatalError("specified quantity is not non-fatal"),
                quantity=opts.quantity,
                priorities=list(combination),
            )

    return Result()


def find_min_suitable_quantity(
    divider: Divider, opts: Opts, suitable_diff: float
) -> Tuple[int, Result]:
    """Find the least quantity whose distribution is within suitable_diff percent."""
    for quantity in range(1, opts.quantity + 1):
        params = Opts(quantity=quantity, priorities=opts.priorities)

        if is_suitable_quantity(divider, params, suitable_diff).ok:
            return quantity, Result()

    return 0, Result(
        conclusion=QuantityNotFoundError("failed to find minimum quantity"),
        quantity=opts.quantity,
        priorities=list(opts.priorities),
    )


def _checked(value: int) -> int:
    if value > MAX_UINT:
        raise OverflowError("integer overflow")

    return value


def _reference_basis(opts: Opts) -> Tuple[int, int]:
    base = _checked(sum(opts.priorities))
    ratio = _checked(base * _REFERENCE_FACTOR)
    quantity = _checked(opts.quantity * ratio)

    return quantity, ratio


def is_suitable_quantity(divider: Divider, opts: Opts, suitable_diff: float) -> Result:
    """Check that each share differs from the real value by at most suitable_diff percent."""
    try:
        reference_quantity, reference_ratio = _reference_basis(opts)
    except OverflowError as exc:
        return Result(
            conclusion=ReferenceBasisCalculationFailedError(
                "failed to calculate basis of reference distribution"
            ),
            err=exc,
            quantity=opts.quantity,
            priorities=list(opts.priorities),
        )

    for combination in _every(opts.priorities):
        reference: Dict[int, int] = {}
        actual: Dict[int, int] = {}

        failed = _call(divider, reference_quantity, combination, reference)
        if failed is not None:
            return failed

        if not _is_filled(combination, reference):
            return Result(
                conclusion=ReferenceDistributionUnfilledError(
                    "reference distribution is not filled"
                ),
                quantity=opts.quantity,
                priorities=list(combination),
            )

        failed = _call(divider, opts.quantity, combination, actual)
        if failed is not None:
            return failed

        if not _is_suitable_diff(combination, reference, actual, reference_ratio, suitable_diff):
            return Result(
                conclusion=QuantityNotSuitableError("specified quantity is not suitable"),
                quantity=opts.quantity,
                priorities=list(combination),
            )

    return Result()


def _is_suitable_diff(
    priorities: Sequence[int],
    reference: Dict[int, int],
    actual: Dict[int, int],
    reference_ratio: int,
    suitable_diff: float,
) -> bool:
    for priority in priorities:
        quantity = actual.get(priority, 0)
        reference_quantity = reference[priority]

        diff = 1.0 - float(reference_ratio) * float(quantity) / float(reference_quantity)

        if _HUNDRED_PERCENT * abs(diff) > suitable_diff:
            return False

    return True