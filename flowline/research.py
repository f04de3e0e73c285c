"""Research helpers for analysing the timing of passed items.

Times and durations are integer nanoseconds.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

_HUNDRED_PERCENT = 100
_DEVIATION_MIN = -100
_DEVIATION_MAX = 100

_NANOSECOND = 1
_MICROSECOND = 1_000
_MILLISECOND = 1_000_000
_SECOND = 1_000_000_000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE


@dataclass(frozen=True)
class QoT:
    """Quantity over time."""

    quantity: int
    time: int


@dataclass(frozen=True)
class BarData:
    """One bar of a bar chart."""

    name: str
    value: int
    tooltip_show: bool = True


def _fraction(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    width = len(str(scale)) - 1
    digits = str(frac).rjust(width, "0").rstrip("0")

    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(nanoseconds: int) -> str:
    """Format a duration like '1h2m3.5s', '8.500001ms' or '100ns'."""
    if nanoseconds == 0:
        return "0s"

    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)

    if value < _SECOND:
        if value < _MICROSECOND:
            return f"{sign}{value}ns"

        if value < _MILLISECOND:
            return f"{sign}{_fraction(value, _MICROSECOND)}µs"

        return f"{sign}{_fraction(value, _MILLISECOND)}ms"

    hours, value = divmod(value, _HOUR)
    minutes, value = divmod(value, _MINUTE)
    seconds = _fraction(value, _SECOND) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"

    if minutes:
        return f"{sign}{minutes}m{seconds}"

    return sign + seconds


def quantity_per_interval(
    times: Iterable[int],
    intervals_number: int,
    interval: int,
) -> Tuple[List[QoT], int]:
    """Count times falling into consecutive spans.

    Either the span length (interval) or, when it is zero, the number of spans
    is used. Returns the counts and the interval actually used.
    """
    ordered = sorted(times)

    if not ordered:
        return [], 0

    if interval < 0:
        raise ValueError("interval cannot be negative")

    max_time = ordered[-1]

    if interval == 0:
        if intervals_number == 0:
            return [], 0

        # Rounded up so that the max time falls into the last span
        interval = -(-max_time // intervals_number)

        if interval * intervals_number == max_time:
            interval += _NANOSECOND
    else:
        intervals_number = max_time // interval + 1

    quantities: List[QoT] = []
    edge = 0
    span = interval

    while span <= max_time + interval:
        end = bisect_left(ordered, span, edge)
        quantities.append(QoT(quantity=end - edge, time=span - interval))
        edge = end
        span += interval

    for addition in range(intervals_number - len(quantities)):
        quantities.append(QoT(quantity=0, time=max_time + interval * (addition + 1)))

    return quantities, interval


def qot_to_bar_chart(quantities: Iterable[QoT]) -> Tuple[List[BarData], List[int]]:
    """Convert quantities over time into bars and their abscissa."""
    bars = [BarData(name=format_duration(item.time), value=item.quantity) for item in quantities]

    return bars, list(range(len(bars)))


def _truncated_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor > 0) else -quotient


def deviations(times: Iterable[int], expected: int) -> Dict[int, int]:
    """Histogram of relative deviations (in percent) of intervals between times."""
    ordered = sorted(times)

    if not ordered:
        return {}

    result = {percent: 0 for percent in range(_DEVIATION_MIN, _DEVIATION_MAX + 1)}

    previous = 0

    for current in ordered:
        deviation = _truncated_div((current - previous - expected) * _HUNDRED_PERCENT, expected)
        deviation = max(-_HUNDRED_PERCENT, min(_HUNDRED_PERCENT, deviation))
        result[deviation] += 1
        previous = current

    return result


def deviations_to_bar_chart(deviations: Dict[int, int]) -> Tuple[List[BarData], List[int]]:
    """Convert a deviations histogram into bars ordered by percent."""
    percents = sorted(deviations)
    bars = [BarData(name=f"{percent}%", value=deviations[percent]) for percent in percents]

    return bars, percents


def total_duration(durations: Iterable[int]) -> int:
    """Largest of the durations, or zero for none."""
    return max(durations, default=0)