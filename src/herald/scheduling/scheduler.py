"""Timer sources for the heads-up timeline.

ThreadedScheduler runs callbacks on one background worker thread against
the monotonic clock. VirtualScheduler keeps a simulated clock that only
moves when told to, for replays and tests.
"""

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable

from herald.collaborators.base import CancelToken, Scheduler

logger = logging.getLogger(__name__)


class _TimerHeap:
    """Deadline-ordered heap of tokens; ties fire in scheduling order."""

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, CancelToken]] = []
        self._seq = itertools.count()

    def push(self, token: CancelToken) -> None:
        heapq.heappush(self._heap, (token.due_ms, next(self._seq), token))

    def pop_due(self, now_ms: int) -> CancelToken | None:
        """Pop the earliest live token due at or before ``now_ms``."""
        while self._heap:
            due, _, token = self._heap[0]
            if token.cancelled:
                heapq.heappop(self._heap)
                continue
            if due > now_ms:
                return None
            heapq.heappop(self._heap)
            return token
        return None

    def next_due(self) -> int | None:
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    def __len__(self) -> int:
        return sum(1 for _, _, token in self._heap if not token.cancelled)


class ThreadedScheduler(Scheduler):
    """Background thread that fires scheduled callbacks at their deadlines."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the scheduler.

        Args:
            clock: Seconds-based monotonic clock.
        """
        self._clock = clock
        self._timers = _TimerHeap()
        self._cond = threading.Condition()
        self._stopping = False
        self._thread: threading.Thread | None = None

    def now(self) -> int:
        return int(self._clock() * 1000)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> CancelToken:
        token = CancelToken(self.now() + max(0, delay_ms), callback)
        with self._cond:
            self._timers.push(token)
            self._cond.notify()
        return token

    def cancel(self, token: CancelToken) -> None:
        with self._cond:
            token.cancelled = True
            self._cond.notify()

    @property
    def pending(self) -> int:
        """Number of callbacks not yet fired or cancelled."""
        with self._cond:
            return len(self._timers)

    # ── Lifecycle ─────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Scheduler already running")
            return

        self._stopping = False
        self._thread = threading.Thread(target=self._run, name="herald-scheduler", daemon=True)
        self._thread.start()
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the worker thread. Pending callbacks are dropped."""
        with self._cond:
            self._stopping = True
            self._cond.notify()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("Scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if the worker thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        """Main loop — wait for the next deadline, then fire it."""
        while True:
            with self._cond:
                if self._stopping:
                    return
                token = self._timers.pop_due(self.now())
                if token is None:
                    next_due = self._timers.next_due()
                    timeout = None if next_due is None else max(0, next_due - self.now()) / 1000
                    self._cond.wait(timeout)
                    continue
            # Run outside the condition so callbacks may schedule or cancel.
            try:
                token.run()
            except Exception:
                logger.exception("Scheduled callback failed")


class VirtualScheduler(Scheduler):
    """Deterministic scheduler driven by an explicit simulated clock."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._timers = _TimerHeap()

    def now(self) -> int:
        return self._now

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> CancelToken:
        token = CancelToken(self._now + max(0, delay_ms), callback)
        self._timers.push(token)
        return token

    def cancel(self, token: CancelToken) -> None:
        token.cancelled = True

    @property
    def pending(self) -> int:
        """Number of callbacks not yet fired or cancelled."""
        return len(self._timers)

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward by ``delta_ms``, firing due callbacks.

        Returns:
            Number of callbacks fired.
        """
        return self.advance_to(self._now + delta_ms)

    def advance_to(self, target_ms: int) -> int:
        """Move the clock to ``target_ms``, firing callbacks in deadline order.

        Each callback sees the clock at its own deadline. Callbacks that
        schedule further callbacks due before ``target_ms`` are fired in the
        same call.

        Raises:
            ValueError: If ``target_ms`` lies in the past.
        """
        if target_ms < self._now:
            raise ValueError(f"Cannot move clock backwards ({target_ms} < {self._now})")

        fired = 0
        while True:
            token = self._timers.pop_due(target_ms)
            if token is None:
                break
            self._now = max(self._now, token.due_ms)
            token.run()
            fired += 1
        self._now = target_ms
        return fired
