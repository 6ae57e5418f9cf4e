"""Executives — the periodic tick sources that drive a timer engine."""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

TickHandler = Callable[[], None]

# Shortest period a threaded executive will wait between ticks.
MIN_INTERVAL = 1e-4


class Executive:
    """Base class for tick sources.

    An executive delivers ticks to :attr:`tick_handler` every
    :attr:`time_interval` seconds between :meth:`fire` and :meth:`suspend`.
    Ticks are never delivered concurrently.  The handler may be replaced at
    any time between ticks.

    Calling :meth:`fire` while already firing is a no-op: the callback is not
    invoked and no second tick stream is started.
    """

    def __init__(self, time_interval: float = 1.0) -> None:
        self.time_interval: float = time_interval
        self.tick_handler: TickHandler | None = None
        self._firing: bool = False

    @property
    def is_firing(self) -> bool:
        return self._firing

    def fire(self, on_started: Callable[[], None] | None = None) -> None:
        """Begin delivering ticks, then invoke *on_started* once."""
        if self._firing:
            logger.debug("fire() ignored, executive already firing")
            return
        self._firing = True
        self._schedule()
        if on_started is not None:
            on_started()

    def suspend(self, on_stopped: Callable[[], None] | None = None) -> None:
        """Cancel future ticks, then invoke *on_stopped* once."""
        if self._firing:
            self._firing = False
            self._cancel()
        if on_stopped is not None:
            on_stopped()

    # -- subclass hooks ------------------------------------------------------

    def _schedule(self) -> None:
        raise NotImplementedError

    def _cancel(self) -> None:
        raise NotImplementedError

    def _deliver(self) -> None:
        handler = self.tick_handler
        if handler is not None:
            handler()


class ManualExecutive(Executive):
    """An executive ticked by its host.

    Nothing happens on its own: the owner's loop (or a test) calls
    :meth:`advance` once per elapsed interval.
    """

    def _schedule(self) -> None:
        pass

    def _cancel(self) -> None:
        pass

    def advance(self, ticks: int = 1) -> int:
        """Deliver up to *ticks* ticks and return how many were delivered.

        Delivery stops early if a tick suspends the executive.
        """
        delivered = 0
        for _ in range(ticks):
            if not self._firing:
                break
            self._deliver()
            delivered += 1
        return delivered


class ThreadingExecutive(Executive):
    """An executive backed by a daemon thread.

    Each tick is delivered on the worker thread while holding a re-entrant
    lock that :meth:`suspend` also takes, so once ``suspend()`` returns no
    further tick can start.  The lock is re-entrant so a tick handler may
    suspend its own executive.

    Intervals shorter than :data:`MIN_INTERVAL`, including zero, are raised
    to it.
    """

    def __init__(self, time_interval: float = 1.0) -> None:
        super().__init__(time_interval)
        self._lock = threading.RLock()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def fire(self, on_started: Callable[[], None] | None = None) -> None:
        with self._lock:
            super().fire(on_started)

    def suspend(self, on_stopped: Callable[[], None] | None = None) -> None:
        with self._lock:
            super().suspend(on_stopped)

    def join(self, timeout: float | None = None) -> None:
        """Wait for the most recent worker thread to exit."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _schedule(self) -> None:
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._run,
            args=(stop_event, max(self.time_interval, MIN_INTERVAL)),
            name="magictimer-executive",
            daemon=True,
        )
        self._thread.start()

    def _cancel(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
            self._stop_event = None

    def _run(self, stop_event: threading.Event, interval: float) -> None:
        while not stop_event.wait(interval):
            with self._lock:
                if stop_event.is_set():
                    break
                self._deliver()
        logger.debug("executive thread exiting")
