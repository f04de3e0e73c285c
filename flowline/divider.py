"""Dividers deciding how many items of each priority go to the handlers."""

from __future__ import annotations

from typing import Dict, Sequence

MAX_UINT = 2**64 - 1


def fair(quantity: int, priorities: Sequence[int], distribution: Dict[int, int]) -> Dict[int, int]:
    """Distribute the quantity evenly among priorities.

    Adds to the distribution and returns it. Example: 10 over [7, 2, 1]
    gives {7: 4, 2: 3, 1: 3}.
    """
    base, remainder = divmod(quantity, len(priorities))

    for priority in priorities:
        part = base

        if remainder:
            part += 1
            remainder -= 1

        distribution[priority] = distribution.get(priority, 0) + part

    return distribution


def rate(quantity: int, priorities: Sequence[int], distribution: Dict[int, int]) -> Dict[int, int]:
    """Distribute the quantity in ratio to the priorities.

    Adds to the distribution and returns it. Example: 6 over [3, 2, 1]
    gives {3: 3, 2: 2, 1: 1}. Raises OverflowError if the sum of priorities
    does not fit an unsigned 64-bit integer.
    """
    divider = sum(priorities)

    if divider > MAX_UINT:
        raise OverflowError("calculation of the sum of priorities: integer overflow")

    base, remainder = divmod(quantity, divider)

    # Fills every priority quickly when there are few handlers
    quicking = min(len(priorities), remainder)
    remainder -= quicking

    for priority in priorities:
        part = base * priority

        if quicking:
            part += 1
            quicking -= 1

        rating = priority - 1

        if remainder < rating:
            part += remainder
            remainder = 0
        else:
            part += rating
            remainder -= rating

        distribution[priority] = distribution.get(priority, 0) + part

    return distribution