"""Priority ordering, divider checking and errors of the priority discipline."""

from __future__ import annotations

from typing import Callable, Dict, Sequence


class PriorityError(ValueError):
    """Base error of the priority discipline."""


class DividerBadError(PriorityError):
    """Divider creates an incorrect distribution."""


class DividerEmptyError(PriorityError):
    """Divider was not specified."""


class HandlersQuantityTooSmallError(PriorityError):
    """Quantity of data handlers is too small."""


class HandlersQuantityZeroError(PriorityError):
    """Quantity of data handlers is zero."""


class InputEmptyError(PriorityError):
    """Input channel was not specified."""


class InputExistsError(PriorityError):
    """Input channel already specified."""


class PriorityZeroError(PriorityError):
    """Zero priority is specified."""


Divider = Callable[[int, Sequence[int], Dict[int, int]], object]


def compare(first: int, second: int) -> int:
    """Comparison that orders priorities from highest to lowest."""
    return (second > first) - (second < first)


def divide(
    divider: Divider,
    quantity: int,
    priorities: Sequence[int],
    distribution: Dict[int, int],
) -> Dict[int, int]:
    """Fill the distribution with the divider and check that it holds the quantity."""
    divider(quantity, priorities, distribution)

    distributed = sum(distribution.get(priority, 0) for priority in priorities)

    if distributed != quantity:
        raise DividerBadError("divider creates an incorrect distribution")

    return distribution