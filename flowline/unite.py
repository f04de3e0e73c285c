"""Discipline uniting incoming lists into lists of bounded size.

Works like the join discipline but takes sequences as input and unites their
items into one list. Input sequences are never split between output lists;
a sequence at least as long as the join size is passed on by itself.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from flowline.channel import Channel
from flowline.join import _Accumulator


class UniteError(ValueError):
    """Base error of the unite discipline."""


class InputEmptyError(UniteError):
    """Input channel was not specified."""


class JoinSizeZeroError(UniteError):
    """Join size is zero."""


class Uniter(_Accumulator):
    """Unites incoming sequences into lists of at most join_size items.

    The output list may be shorter than join_size due to the timeout, the end
    of the source or because sequences are kept whole, and longer if an input
    sequence is itself longer. The timeout is in seconds; zero or a negative
    value disables it. With no_copy release() must be called after each
    output is no longer used.
    """

    def __init__(
        self,
        source: Iterable[Sequence],
        join_size: int,
        no_copy: bool = False,
        timeout: float = 0.0,
    ) -> None:
        if source is None:
            raise InputEmptyError("input channel was not specified")

        if join_size == 0:
            raise JoinSizeZeroError("join size is zero")

        if join_size < 0:
            raise UniteError("join size is negative")

        super().__init__(source, join_size, no_copy, timeout)

    def output(self) -> Channel:
        """Output channel; it is closed when the discipline terminates."""
        return self._output

    def release(self) -> None:
        """Mark the last output list as no longer used (needed with no_copy)."""
        if self._no_copy:
            self._release.send(None)

    def _add(self, item: Sequence) -> None:
        if len(item) >= self._join_size:
            self._pass()
            self._forward(item)
            return

        if len(item) + len(self._join) > self._join_size:
            self._pass()

        self._join.extend(item)

        if len(self._join) >= self._join_size:
            self._pass()

    def _forward(self, item: Sequence) -> None:
        self._send(item)
        self._reset_timer()