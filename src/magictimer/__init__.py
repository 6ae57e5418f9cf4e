"""magictimer: a stop-watch / count-down timer engine."""

from magictimer.core.timer import (
    CountDown,
    InvalidConfiguration,
    InvalidCountdownAlignment,
    StopWatch,
    TimerConfig,
    TimerEngine,
    TimerError,
    TimerState,
)

__version__ = "1.0.0"

__all__ = [
    "CountDown",
    "InvalidConfiguration",
    "InvalidCountdownAlignment",
    "StopWatch",
    "TimerConfig",
    "TimerEngine",
    "TimerError",
    "TimerState",
    "__version__",
]
