"""Bounded channel between the line source and the worker pool."""

import queue
import threading
from collections.abc import Iterator

from access_log_analyzer.source.types import NumberedLine

# Lines buffered between producer and workers before the producer blocks.
DEFAULT_QUEUE_CAPACITY = 1024

# Seconds between abort checks while blocked on a full or empty queue.
POLL_INTERVAL = 0.05

_END_OF_STREAM = object()


class QueueAbortedError(RuntimeError):
    """The queue was aborted while a producer was waiting on it."""


class LineQueue:
    """
    Fixed-capacity FIFO of numbered lines with close semantics.

    put() blocks while capacity items are waiting, which bounds memory to
    capacity lines however large the input is. close() appends one
    end-of-stream marker per consumer, so every consumer drains what was
    queued before it and then stops.

    abort() releases everyone at once: a blocked put() raises
    QueueAbortedError, close() stops adding markers and consumers stop
    iterating. It is used when a consumer dies and the rest can no longer
    be relied on to drain the queue.
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY, consumers: int = 1):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if consumers < 1:
            raise ValueError(f"consumers must be at least 1, got {consumers}")
        self._capacity = capacity
        self._consumers = consumers
        self._queue: queue.Queue[object] = queue.Queue(maxsize=capacity)
        self._closed = False
        self._aborted = threading.Event()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def consumers(self) -> int:
        return self._consumers

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def qsize(self) -> int:
        return self._queue.qsize()

    def _offer(self, item: object) -> bool:
        """Block until item is enqueued; False if the queue was aborted first."""
        while not self._aborted.is_set():
            try:
                self._queue.put(item, timeout=POLL_INTERVAL)
            except queue.Full:
                continue
            return True
        return False

    def put(self, item: NumberedLine) -> None:
        """Enqueue a line, blocking while the queue is full."""
        if self._closed:
            raise RuntimeError("put() on a closed LineQueue")
        if not self._offer(item):
            raise QueueAbortedError("put() on an aborted LineQueue")

    def close(self) -> None:
        """Signal end of input. Calling it again has no effect."""
        if self._closed:
            return
        self._closed = True
        for _ in range(self._consumers):
            if not self._offer(_END_OF_STREAM):
                return

    def abort(self) -> None:
        self._aborted.set()

    def __iter__(self) -> Iterator[NumberedLine]:
        """Yield lines until this consumer's end-of-stream marker or an abort."""
        while not self._aborted.is_set():
            try:
                item = self._queue.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue
            if item is _END_OF_STREAM:
                return
            yield item  # type: ignore[misc]
