"""Observer contract between the OrderHub and the views that watch it.

The hub never calls an observer directly: it hands each notification to the
observer's dispatch function, so a UI observer can have its re-render run on
its own thread instead of the hub's worker thread.
"""

from __future__ import annotations

import queue
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from shophub.domain.model.order import OrderState

OrderMap = Mapping[int, OrderState]
Dispatch = Callable[[Callable[[], None]], None]


class OrderMapObserver(ABC):

    @abstractmethod
    def on_order_map_updated(self, projection: OrderMap) -> None:
        """Receive a read-only, key-ordered snapshot of the orders this observer sees."""


def dispatch_inline(callback: Callable[[], None]) -> None:
    callback()


class QueueDispatcher:
    """FIFO hand-off to a UI-style thread.

    Any thread may enqueue; the owning thread drains with ``run_pending()``.
    Callbacks run in the order they were enqueued, which preserves the hub's
    commit order.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def __call__(self, callback: Callable[[], None]) -> None:
        self._queue.put(callback)

    def run_pending(self, timeout: float | None = None) -> int:
        """Run every queued callback; optionally wait up to ``timeout`` for the first."""
        ran = 0
        if timeout is not None:
            try:
                callback = self._queue.get(timeout=timeout)
            except queue.Empty:
                return 0
            callback()
            ran += 1
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            callback()
            ran += 1
