"""Discipline accumulating items into lists of bounded size.

Items taken from a source are collected into a list that is written to the
output channel once it reaches the join size, once the accumulation timeout
expires, or once the source is exhausted.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Iterable, List, Optional

from flowline.channel import Channel, ChannelClosed


class JoinError(ValueError):
    """Base error of the join discipline."""


class InputEmptyError(JoinError):
    """Input channel was not specified."""


class JoinSizeZeroError(JoinError):
    """Join size is zero."""


class _Accumulator:
    """Runs the accumulation loop in a background thread.

    Subclasses define how an incoming item is added to the accumulated list.
    """

    def __init__(self, source: Iterable, join_size: int, no_copy: bool, timeout: float) -> None:
        self._source = source
        self._join_size = join_size
        self._no_copy = no_copy
        self._timeout = max(timeout, 0)

        self._join: List[Any] = []
        self._deadline: Optional[float] = None

        capacity = source.capacity if isinstance(source, Channel) else 0
        self._output: Channel = Channel(1 + capacity)
        self._release: Channel = Channel(0)

        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _add(self, item: Any) -> None:
        raise NotImplementedError

    def _run(self) -> None:
        try:
            if self._timeout == 0:
                self._loop_without_timeout()
            else:
                self._loop()
        finally:
            self._release.close()
            self._output.close()

    def _loop_without_timeout(self) -> None:
        try:
            for item in self._source:
                self._add(item)
        finally:
            self._pass()

    def _loop(self) -> None:
        inputs = self._source if isinstance(self._source, Channel) else self._feed(self._source)

        self._reset_timer()

        try:
            while True:
                remaining = max(0.0, self._deadline - time.monotonic())

                try:
                    item = inputs.receive(remaining)
                except TimeoutError:
                    self._pass()
                    continue
                except ChannelClosed:
                    return

                self._add(item)
        finally:
            self._pass()

    @staticmethod
    def _feed(source: Iterable) -> Channel:
        channel: Channel = Channel(0)

        def pump() -> None:
            try:
                for item in source:
                    channel.send(item)
            finally:
                channel.close()

        threading.Thread(target=pump, daemon=True).start()

        return channel

    def _pass(self) -> None:
        if self._join:
            self._send(self._join)
            self._join = []

        self._reset_timer()

    def _send(self, item: Any) -> None:
        self._output.send(item if self._no_copy else list(item))

        if self._no_copy:
            self._release.receive()

    def _reset_timer(self) -> None:
        if self._timeout:
            self._deadline = time.monotonic() + self._timeout


class Joiner(_Accumulator):
    """Accumulates single items into lists of at most join_size items.

    The timeout is in seconds; zero or a negative value means waiting for
    missing items until they appear or the source is exhausted. With no_copy
    the accumulated list itself is written to the output and release() must
    be called once it is no longer used.
    """

    def __init__(
        self,
        source: Iterable,
        join_size: int,
        no_copy: bool = False,
        timeout: float = 0.0,
    ) -> None:
        if source is None:
            raise InputEmptyError("input channel was not specified")

        if join_size == 0:
            raise JoinSizeZeroError("join size is zero")

        if join_size < 0:
            raise JoinError("join size is negative")

        super().__init__(source, join_size, no_copy, timeout)

    def output(self) -> Channel:
        """Output channel; it is closed when the discipline terminates."""
        return self._output

    def release(self) -> None:
        """Mark the last output list as no longer used (needed with no_copy)."""
        if self._no_copy:
            self._release.send(None)

    def _add(self, item: Any) -> None:
        self._join.append(item)

        if len(self._join) >= self._join_size:
            self._pass()