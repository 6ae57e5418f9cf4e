"""Background calculator — wall-clock time missed while ticking was suspended."""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

ElapsedHandler = Callable[[float], None]


class BackgroundCalculator:
    """Measures how long a timer has been running when the host resumes.

    The owner records :attr:`timer_fired_date` whenever ticking starts.  The
    host reports lifecycle transitions with :meth:`did_enter_background` and
    :meth:`will_enter_foreground`; on the latter, if the mode is active and a
    background entry was seen, the wall-clock time since the fired date is
    passed to :attr:`elapsed_handler` and the fired date is cleared.

    Uses ``time.time()`` because a monotonic clock may not advance while the
    process is suspended.
    """

    def __init__(self, is_active_background_mode: bool = True) -> None:
        self.is_active_background_mode: bool = is_active_background_mode
        self.elapsed_handler: ElapsedHandler | None = None
        self._timer_fired_date: float | None = None
        self._should_calculate: bool = False

    @property
    def timer_fired_date(self) -> float | None:
        return self._timer_fired_date

    def set_timer_fired_date(self, value: float | None = None) -> None:
        """Record *value* (defaults to now) as the moment ticking started."""
        self._timer_fired_date = time.time() if value is None else value

    def invalidate_fired_date(self) -> None:
        self._timer_fired_date = None
        self._should_calculate = False

    def calculate_date_difference(self) -> float | None:
        """Return seconds since the fired date, or ``None`` if there is none."""
        if self._timer_fired_date is None:
            return None
        return abs(time.time() - self._timer_fired_date)

    # -- host lifecycle signals ----------------------------------------------

    def did_enter_background(self) -> None:
        self._should_calculate = True

    def will_enter_foreground(self) -> float | None:
        """Report the elapsed time to the handler and return it.

        Returns ``None`` when nothing was reported.
        """
        if not (self.is_active_background_mode and self._should_calculate):
            return None
        self._should_calculate = False

        elapsed = self.calculate_date_difference()
        if elapsed is None:
            return None
        self._timer_fired_date = None
        if self.elapsed_handler is not None:
            self.elapsed_handler(elapsed)
        logger.debug("background time calculation completed: %.3fs", elapsed)
        return elapsed
