"""Background thread driving collection cycles on a fixed cadence."""
from __future__ import annotations

import enum
import logging
import threading
import time
from typing import Callable, Optional

from .assembler import SnapshotAssembler

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    STOPPED = "stopped"
    WARMUP = "warmup"
    RUNNING = "running"
    STOPPING = "stopping"


class StatsScheduler:
    """
    Runs the assembler once immediately, then once per interval.

    Cycles run back to back on a single daemon thread, so they never overlap.
    Ticks missed while a slow cycle is in flight collapse into one immediate
    cycle; there is no catch-up burst.
    """

    def __init__(
        self,
        assembler: SnapshotAssembler,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the StatsScheduler.

        Args:
            assembler: Collector whose ``run_cycle`` is invoked on every tick.
            interval: Seconds between ticks.
            clock: Monotonic time source used to place ticks.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._assembler = assembler
        self._interval = interval
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._state = SchedulerState.STOPPED
        self._cycles_completed = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles_completed(self) -> int:
        return self._cycles_completed

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the collection thread; a no-op when already running.

        A thread left over from a stop that timed out must exit before a new
        one is started, so ``start`` refuses while it is still alive.
        """
        if self.is_running:
            if self._state is SchedulerState.STOPPING:
                logger.warning("Previous stats scheduler thread is still finishing; not starting")
            return

        stop_event = threading.Event()
        self._stop_event = stop_event
        self._state = SchedulerState.WARMUP
        self._thread = threading.Thread(
            target=self._run,
            args=(stop_event,),
            daemon=True,
            name="StatsScheduler",
        )
        self._thread.start()
        logger.info("Stats scheduler started with interval %.2fs", self._interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Cancel the timer and wait for an in-flight cycle to finish.

        When the thread outlives ``timeout`` the scheduler stays in
        ``STOPPING`` and keeps the thread until it exits.

        Args:
            timeout: How long to wait for the thread to stop (seconds).
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            self._state = SchedulerState.STOPPING
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Stats scheduler did not stop within %ss", timeout)
                return
            logger.info("Stats scheduler stopped after %d cycles", self._cycles_completed)
            self._thread = None
        self._state = SchedulerState.STOPPED

    def _run_cycle(self) -> None:
        try:
            self._assembler.run_cycle()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Collection cycle failed")
        else:
            self._cycles_completed += 1

    def _run(self, stop_event: threading.Event) -> None:
        try:
            self._loop(stop_event)
        finally:
            if stop_event.is_set():
                self._state = SchedulerState.STOPPED

    def _loop(self, stop_event: threading.Event) -> None:
        next_tick = self._clock() + self._interval
        self._run_cycle()
        if stop_event.is_set():
            return
        self._state = SchedulerState.RUNNING

        while not stop_event.is_set():
            delay = next_tick - self._clock()
            if delay > 0 and stop_event.wait(timeout=delay):
                break
            self._run_cycle()

            next_tick += self._interval
            now = self._clock()
            if next_tick <= now:
                next_tick = now
