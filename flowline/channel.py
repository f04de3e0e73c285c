"""A closable, optionally buffered channel for passing items between threads."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any, Deque, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised when a channel is used in a way its closed state forbids."""


class Channel(Generic[T]):
    """FIFO channel between threads.

    With a capacity of zero a sender waits until its item has been taken by a
    receiver. With a positive capacity a sender waits only while the buffer is
    full. Closing the channel lets receivers drain what is left and then stop.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("channel capacity cannot be negative")

        self._capacity = capacity
        self._items: Deque[Any] = deque()
        self._closed = False
        self._cond = threading.Condition()
        self._sent = 0
        self._received = 0

    @property
    def capacity(self) -> int:
        """Size of the channel buffer."""
        return self._capacity

    def send(self, item: T) -> None:
        """Put an item into the channel, waiting for room or for a receiver."""
        with self._cond:
            if self._closed:
                raise ChannelClosed("send on closed channel")

            if self._capacity > 0:
                while len(self._items) >= self._capacity and not self._closed:
                    self._cond.wait()

                if self._closed:
                    raise ChannelClosed("send on closed channel")

                self._items.append(item)
                self._cond.notify_all()
                return

            ticket = self._sent
            self._sent += 1
            self._items.append(item)
            self._cond.notify_all()

            while self._received <= ticket:
                self._cond.wait()

    def close(self) -> None:
        """Close the channel; items already in it can still be received."""
        with self._cond:
            if self._closed:
                raise ChannelClosed("close of closed channel")

            self._closed = True
            self._cond.notify_all()

    def receive(self, timeout: Optional[float] = None) -> T:
        """Take the next item.

        Raises ChannelClosed once the channel is closed and empty, and
        TimeoutError if no item arrives within the timeout in seconds.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._cond:
            while not self._items:
                if self._closed:
                    raise ChannelClosed("receive from closed channel")

                if deadline is None:
                    self._cond.wait()
                    continue

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError("no item received within timeout")

                self._cond.wait(remaining)

            item = self._items.popleft()
            self._received += 1
            self._cond.notify_all()

            return item

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                item = self.receive()
            except ChannelClosed:
                return

            yield item