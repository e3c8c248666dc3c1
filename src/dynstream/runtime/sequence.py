# src/dynstream/runtime/sequence.py
"""
Sequence: a background producer thread feeding a bounded FIFO.

The producer owns the write end of the queue and the consumer owns the read
end; at most one consumer may read a Sequence at a time. ``put`` blocks once
the queue holds ``capacity`` states, so a slow reader throttles only its own
producer. Every Sequence carries a cancellation event; ``close`` stops the
producer and releases the queue.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Iterator, Sequence as SequenceT

from dynstream.errors import SequenceClosed, SequenceExhausted, SequenceStalled
from dynstream.kernels import RecurrenceKernel, State

__all__ = ["QUEUE_CAPACITY", "Sequence", "create_sequence"]

logger = logging.getLogger(__name__)

QUEUE_CAPACITY = 400

# Poll interval for blocked gets so cancellation is observed promptly.
_POLL = 0.05


class _ProducerFailure:
    __slots__ = ("exc",)

    def __init__(self, exc: BaseException):
        self.exc = exc


class Sequence:
    """Handle on one lazily computed trajectory.

    Reads happen in strict generation order. A terminal state is handed out
    exactly once; any later read raises :class:`SequenceExhausted` instead of
    blocking.
    """

    def __init__(
        self,
        states: Iterator[State],
        *,
        label: str = "",
        capacity: int = QUEUE_CAPACITY,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.label = label or f"seq-{id(self):x}"
        self.capacity = int(capacity)
        self._states = states
        self._cancel = threading.Event()
        # Queue and thread are allocated on start so idle cells stay cheap.
        self._queue: queue.Queue | None = None
        self._thread: threading.Thread | None = None
        self._ended = False
        self._consumed = 0

    # ---- producer side -------------------------------------------------

    def start(self) -> "Sequence":
        if self._thread is None and not self._cancel.is_set():
            self._queue = queue.Queue(maxsize=self.capacity)
            self._thread = threading.Thread(
                target=self._produce, name=f"dynstream-{self.label}", daemon=True
            )
            self._thread.start()
            logger.debug("started producer %s", self.label)
        return self

    @property
    def started(self) -> bool:
        return self._thread is not None

    def _produce(self) -> None:
        try:
            for state in self._states:
                if not self._put(state):
                    return
                if state.terminal:
                    logger.debug(
                        "sequence %s diverged at step %d: %r", self.label, state.index, state.values
                    )
                    return
        except Exception as exc:
            logger.debug("sequence %s producer failed: %s", self.label, exc)
            self._put(_ProducerFailure(exc))
        finally:
            self._states = iter(())

    def _put(self, item) -> bool:
        # Blocks without polling; cancel() drains the queue to wake it.
        if self._cancel.is_set():
            return False
        self._queue.put(item)
        return not self._cancel.is_set()

    # ---- consumer side -------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._cancel.is_set()

    @property
    def ended(self) -> bool:
        """True once the terminal state has been read."""
        return self._ended

    @property
    def consumed(self) -> int:
        """Number of states read so far."""
        return self._consumed

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next(self, timeout: float | None = None) -> State:
        """Read the next state, blocking until the producer supplies it.

        With a finite ``timeout`` the wait is bounded and expiry raises
        :class:`SequenceStalled`.
        """
        if self._cancel.is_set():
            raise SequenceClosed(self.label)
        if self._ended:
            raise SequenceExhausted(self.label)
        if self._thread is None:
            self.start()

        item = self._get(timeout)
        if isinstance(item, _ProducerFailure):
            self._ended = True
            raise item.exc
        if item.terminal:
            self._ended = True
        self._consumed += 1
        return item

    def _get(self, timeout: float | None):
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._cancel.is_set():
                raise SequenceClosed(self.label)
            wait = _POLL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise SequenceStalled(self.label, timeout)
                wait = min(wait, remaining)
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                if not self._thread.is_alive() and self._queue.empty():
                    # Producer is gone without a terminal state; never block on it.
                    self._ended = True
                    raise SequenceExhausted(self.label) from None
                continue

    def __iter__(self) -> Iterator[State]:
        """Yield finite states until the terminal state (consumed, not yielded)."""
        while not self._ended:
            state = self.next()
            if state.terminal:
                return
            yield state

    # ---- lifecycle -----------------------------------------------------

    def cancel(self) -> None:
        """Signal the producer to stop without waiting for it."""
        self._cancel.set()
        self._drain()

    def _drain(self) -> None:
        if self._queue is None:
            return
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def close(self, timeout: float = 1.0) -> None:
        """Signal the producer to stop, release queued states and join the thread."""
        self.cancel()
        if self._thread is None:
            return
        self._thread.join(timeout)
        # The producer may have landed one last state before it saw the cancel.
        self._drain()

    def __enter__(self) -> "Sequence":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "closed" if self.closed else "ended" if self._ended else "open"
        return f"Sequence({self.label!r}, consumed={self._consumed}, {status})"


def create_sequence(
    kernel: RecurrenceKernel,
    initial: SequenceT[float],
    *,
    label: str = "",
    capacity: int = QUEUE_CAPACITY,
    start: bool = True,
) -> Sequence:
    """Create a Sequence for ``kernel`` from ``initial`` and start its producer.

    Domain checks on the initial condition happen here, before the thread
    exists.
    """
    kernel.start(initial)
    seq = Sequence(kernel.iterate(initial), label=label or kernel.name, capacity=capacity)
    if start:
        seq.start()
    return seq
