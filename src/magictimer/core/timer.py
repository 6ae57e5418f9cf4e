"""Timer core — a stop-watch / count-down engine driven by an executive."""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

from magictimer.core.background import BackgroundCalculator
from magictimer.core.counter import Counter
from magictimer.core.executive import Executive, ThreadingExecutive

logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Possible states of the timer."""

    NONE = "none"
    FIRED = "fired"
    STOPPED = "stopped"
    RESTARTED = "restarted"


class TimerError(Exception):
    """Base class for caller errors reported by the timer."""


class InvalidConfiguration(TimerError, ValueError):
    """Raised when a configuration value is negative or otherwise unusable."""


class InvalidCountdownAlignment(TimerError, ValueError):
    """Raised when a count-down cannot step evenly down to zero."""


@dataclass(frozen=True)
class StopWatch:
    """Count up without bound."""


@dataclass(frozen=True)
class CountDown:
    """Count down from *from_seconds* to zero, then stop."""

    from_seconds: float


TimerMode = Union[StopWatch, CountDown]

StateListener = Callable[[TimerState], None]
ElapsedListener = Callable[[float], None]

_STARTABLE_STATES = frozenset({TimerState.NONE, TimerState.STOPPED, TimerState.RESTARTED})

# Relative slack for float step arithmetic, e.g. ten steps of 0.1 from 1.0.
_STEP_TOLERANCE = 1e-9


@dataclass(frozen=True)
class TimerConfig:
    """Settings of a :class:`TimerEngine`.

    ``default_value`` is the baseline the counter resets to,
    ``effective_value`` the amount added or subtracted per tick and
    ``time_interval`` the tick period in seconds.
    """

    default_value: float = 0.0
    effective_value: float = 1.0
    time_interval: float = 1.0
    mode: TimerMode = field(default_factory=StopWatch)
    background_enabled: bool = True

    def validate(self) -> None:
        """Raise ``InvalidConfiguration`` unless every value is usable."""
        for name in ("default_value", "effective_value", "time_interval"):
            value = getattr(self, name)
            # Also rejects NaN.
            if not value >= 0:
                raise InvalidConfiguration(f"{name} must be non-negative, got {value}")
        if not isinstance(self.mode, (StopWatch, CountDown)):
            raise InvalidConfiguration(f"mode must be StopWatch or CountDown, got {self.mode!r}")
        if isinstance(self.mode, CountDown) and not self.mode.from_seconds >= 0:
            raise InvalidConfiguration(
                f"from_seconds must be non-negative, got {self.mode.from_seconds}"
            )


class TimerEngine:
    """Owns a counter, an executive and a background calculator.

    Listeners are called synchronously, on whichever thread produced the
    change: the caller's thread for the public methods, the executive's for
    ticks.  When one call changes both the state and the counted value, state
    listeners are notified before elapsed-time listeners.

    An engine is not thread-safe; callers must serialize access to it.
    """

    def __init__(
        self,
        config: TimerConfig | None = None,
        *,
        executive: Executive | None = None,
        background: BackgroundCalculator | None = None,
        on_state_changed: StateListener | None = None,
        on_elapsed_time_changed: ElapsedListener | None = None,
    ) -> None:
        self._config: TimerConfig = config if config is not None else TimerConfig()
        self._config.validate()

        self._counter = Counter(self._config.default_value, self._config.effective_value)
        self._executive: Executive = executive if executive is not None else ThreadingExecutive()
        self._executive.time_interval = self._config.time_interval
        self._background = background if background is not None else BackgroundCalculator()
        self._background.is_active_background_mode = self._config.background_enabled
        self._background.elapsed_handler = self._reconcile_background

        self._state: TimerState = TimerState.NONE
        self._state_listeners: list[StateListener] = []
        self._elapsed_listeners: list[ElapsedListener] = []
        if on_state_changed is not None:
            self.add_state_listener(on_state_changed)
        if on_elapsed_time_changed is not None:
            self.add_elapsed_listener(on_elapsed_time_changed)
        logger.debug("initialized with %r", self._config)

    # -- observation ---------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def elapsed_time(self) -> float:
        """The counter's current total, in seconds."""
        return self._counter.total

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def executive(self) -> Executive:
        return self._executive

    @property
    def background(self) -> BackgroundCalculator:
        return self._background

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        try:
            self._state_listeners.remove(listener)
        except ValueError:
            pass

    def add_elapsed_listener(self, listener: ElapsedListener) -> None:
        self._elapsed_listeners.append(listener)

    def remove_elapsed_listener(self, listener: ElapsedListener) -> None:
        try:
            self._elapsed_listeners.remove(listener)
        except ValueError:
            pass

    # -- configuration -------------------------------------------------------

    def configure(self, **changes: Any) -> TimerConfig:
        """Apply *changes* to the configuration as a whole.

        Raises ``InvalidConfiguration`` and leaves the current configuration
        untouched if any value is invalid, if a name is not a
        ``TimerConfig`` field, or if the mode would change while the timer is
        fired.  A new ``time_interval`` takes effect the next
        time the timer starts.
        """
        try:
            candidate = dataclasses.replace(self._config, **changes)
        except TypeError as exc:
            raise InvalidConfiguration(str(exc)) from exc
        candidate.validate()
        if self._state == TimerState.FIRED and candidate.mode != self._config.mode:
            raise InvalidConfiguration("mode cannot change while the timer is fired")

        previous_total = self._counter.total
        self._config = candidate
        self._counter.effective_value = candidate.effective_value
        self._counter.default_value = candidate.default_value
        self._executive.time_interval = candidate.time_interval
        self._background.is_active_background_mode = candidate.background_enabled
        if self._counter.total != previous_total:
            self._publish_elapsed()
        return candidate

    @property
    def default_value(self) -> float:
        return self._config.default_value

    @default_value.setter
    def default_value(self, value: float) -> None:
        self.configure(default_value=value)

    @property
    def effective_value(self) -> float:
        return self._config.effective_value

    @effective_value.setter
    def effective_value(self, value: float) -> None:
        self.configure(effective_value=value)

    @property
    def time_interval(self) -> float:
        return self._config.time_interval

    @time_interval.setter
    def time_interval(self, value: float) -> None:
        self.configure(time_interval=value)

    @property
    def mode(self) -> TimerMode:
        return self._config.mode

    @mode.setter
    def mode(self, value: TimerMode) -> None:
        self.configure(mode=value)

    @property
    def background_enabled(self) -> bool:
        return self._config.background_enabled

    @background_enabled.setter
    def background_enabled(self, value: bool) -> None:
        self.configure(background_enabled=value)

    # -- commands ------------------------------------------------------------

    def start(self) -> None:
        """Start counting in the configured mode.

        A count-down is re-seeded to its ``from_seconds`` on every start and
        raises ``InvalidCountdownAlignment`` if ``default_value +
        from_seconds`` is not a multiple of ``effective_value``.  Calling
        ``start()`` while fired does nothing.
        """
        if self._state not in _STARTABLE_STATES:
            logger.debug("start() ignored, timer already %s", self._state.value)
            return

        mode = self._config.mode
        if isinstance(mode, CountDown):
            self._require_alignment(mode)
            self._counter.total = mode.from_seconds
            self._executive.tick_handler = self._count_down_tick
        else:
            self._executive.tick_handler = self._count_up_tick

        self._set_state(TimerState.FIRED)
        if isinstance(mode, CountDown):
            self._publish_elapsed()
        self._executive.time_interval = self._config.time_interval
        self._executive.fire(self._background.set_timer_fired_date)
        logger.debug("timer started in %s mode", type(mode).__name__)

    def stop(self) -> None:
        """Stop counting.  Only a fired timer becomes STOPPED."""
        if self._state != TimerState.FIRED:
            logger.debug("stop() ignored, timer is %s", self._state.value)
            return
        self._halt()
        self._set_state(TimerState.STOPPED)
        logger.debug("timer stopped")

    def reset(self) -> None:
        """Stop counting and reset the counted value to zero."""
        self._halt()
        self._counter.reset_total_counted()
        self._set_state(TimerState.RESTARTED)
        self._publish_elapsed()
        logger.debug("timer restarted")

    def reset_to_default(self) -> None:
        """Stop counting and reset the counted value to ``default_value``."""
        self._halt()
        self._counter.reset_to_default_value()
        self._set_state(TimerState.RESTARTED)
        self._publish_elapsed()
        logger.debug("timer restarted to default")

    # -- host lifecycle ------------------------------------------------------

    def did_enter_background(self) -> None:
        """Tell the engine the host stopped delivering ticks reliably."""
        self._background.did_enter_background()

    def will_enter_foreground(self) -> None:
        """Tell the engine the host is back; reconciles missed time."""
        self._background.will_enter_foreground()

    # -- private helpers -----------------------------------------------------

    def _require_alignment(self, mode: CountDown) -> None:
        """Raise ``InvalidCountdownAlignment`` unless the count-down lands on zero."""
        step = self._config.effective_value
        total = self._config.default_value + mode.from_seconds
        if step == 0 or not math.isclose(
            round(total / step) * step, total, rel_tol=_STEP_TOLERANCE, abs_tol=_STEP_TOLERANCE
        ):
            raise InvalidCountdownAlignment(
                f"default_value + from_seconds "
                f"({self._config.default_value} + {mode.from_seconds}) "
                f"is not a multiple of effective_value ({step})"
            )

    def _count_up_tick(self) -> None:
        self._counter.add()
        self._publish_elapsed()

    def _count_down_tick(self) -> None:
        if self._count_down_exhausted():
            self._finish_count_down()
            return
        self._counter.subtract()
        if self._count_down_exhausted():
            self._counter.total = 0.0
            self._finish_count_down()
        self._publish_elapsed()

    def _count_down_exhausted(self) -> bool:
        return self._counter.total <= self._counter.effective_value * _STEP_TOLERANCE

    def _finish_count_down(self) -> None:
        self._halt()
        self._set_state(TimerState.STOPPED)
        logger.debug("count-down finished")

    def _halt(self) -> None:
        self._executive.suspend()
        self._background.invalidate_fired_date()

    def _reconcile_background(self, elapsed: float) -> None:
        """Replace the counted value with one derived from wall-clock *elapsed*."""
        if self._state != TimerState.FIRED:
            return
        mode = self._config.mode
        if isinstance(mode, CountDown):
            remaining = mode.from_seconds - elapsed
            # An exhausted count-down floors at one second, not zero.
            self._counter.total = remaining if remaining > 0 else 1.0
        else:
            self._counter.total = elapsed
        self._publish_elapsed()

    def _set_state(self, state: TimerState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)

    def _publish_elapsed(self) -> None:
        total = self._counter.total
        for listener in list(self._elapsed_listeners):
            listener(total)
