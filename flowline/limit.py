"""Discipline limiting the speed at which items pass from input to output."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator

from flowline.channel import Channel


class LimitError(ValueError):
    """Base error of the limit discipline."""


class InputEmptyError(LimitError):
    """Input channel was not specified."""


class IntervalNegativeError(LimitError):
    """Interval is negative."""


class IntervalZeroError(LimitError):
    """Interval is zero."""


class QuantityZeroError(LimitError):
    """Quantity is zero."""


@dataclass(frozen=True)
class Rate:
    """Quantity of items passed per interval (in seconds)."""

    interval: float
    quantity: int

    def validate(self) -> "Rate":
        """Check the fields and return the rate itself."""
        if self.interval < 0:
            raise IntervalNegativeError("interval is negative")

        if self.interval == 0:
            raise IntervalZeroError("interval is zero")

        if self.quantity == 0:
            raise QuantityZeroError("quantity is zero")

        return self


class Limiter:
    """Passes items from the source to the output channel at a limited rate.

    The discipline stops and closes its output once the source is exhausted
    (a channel source is exhausted when it is closed). If the number of items
    is a multiple of the rate quantity, a final delay is still made after the
    last item.
    """

    def __init__(self, source: Iterable, limit: Rate) -> None:
        if source is None:
            raise InputEmptyError("input channel was not specified")

        limit.validate()

        self._source = source
        self._limit = limit

        capacity = source.capacity if isinstance(source, Channel) else 0
        self._output: Channel = Channel(1 + capacity)

        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def output(self) -> Channel:
        """Output channel; it is closed when the discipline terminates."""
        return self._output

    def _run(self) -> None:
        items = iter(self._source)

        try:
            while self._transfer(items):
                pass
        finally:
            self._output.close()

    def _transfer(self, items: Iterator) -> bool:
        started_at = time.monotonic()
        passed = 0

        for item in islice(items, self._limit.quantity):
            self._output.send(item)
            passed += 1

        if passed < self._limit.quantity:
            return False

        remainder = self._limit.interval - (time.monotonic() - started_at)
        if remainder > 0:
            time.sleep(remainder)

        return True