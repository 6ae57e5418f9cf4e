"""CLI entry point for magictimer.

Uses Click to expose the ``magictimer`` command group with ``stopwatch`` and
``countdown`` subcommands that drive a :class:`TimerEngine` on a threaded
executive and print the formatted elapsed time on every change.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Callable, TypeVar

import click

import magictimer
from magictimer.core.executive import ThreadingExecutive
from magictimer.core.formatting import format_elapsed
from magictimer.core.timer import (
    CountDown,
    StopWatch,
    TimerConfig,
    TimerEngine,
    TimerError,
    TimerState,
)

T = TypeVar("T")


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``TimerError`` to a CLI error.

    On ``TimerError`` the message is printed to stderr and the process exits
    with code 1.
    """
    try:
        return action()
    except TimerError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _build_engine(config: TimerConfig, finished: threading.Event) -> TimerEngine:
    def on_state_changed(state: TimerState) -> None:
        if state == TimerState.STOPPED:
            finished.set()

    def on_elapsed(seconds: float) -> None:
        click.echo(format_elapsed(seconds))

    return TimerEngine(
        config,
        executive=ThreadingExecutive(),
        on_state_changed=on_state_changed,
        on_elapsed_time_changed=on_elapsed,
    )


def _wait(engine: TimerEngine, finished: threading.Event) -> None:
    """Block until the engine stops or Ctrl-C."""
    try:
        finished.wait()
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
    finally:
        engine.stop()
        # Let the final tick finish printing.
        executive = engine.executive
        if isinstance(executive, ThreadingExecutive):
            executive.join()


_timing_options = [
    click.option(
        "--interval", type=float, default=1.0, show_default=True, help="Seconds between ticks."
    ),
    click.option(
        "--step", type=float, default=1.0, show_default=True, help="Seconds counted per tick."
    ),
    click.option(
        "--default", type=float, default=0.0, show_default=True, help="Baseline value."
    ),
]


def timing_options(func: Callable[..., None]) -> Callable[..., None]:
    for option in reversed(_timing_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=magictimer.__version__, prog_name="magictimer")
@click.option("-v", "--verbose", is_flag=True, help="Log timer lifecycle to stderr.")
def cli(verbose: bool) -> None:
    """magictimer: a stop-watch and count-down timer."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@timing_options
@click.option("--ticks", type=click.IntRange(min=1), default=None, help="Stop after this many ticks.")
def stopwatch(interval: float, step: float, default: float, ticks: int | None) -> None:
    """Count up until Ctrl-C (or --ticks ticks)."""
    finished = threading.Event()
    config = TimerConfig(
        default_value=default, effective_value=step, time_interval=interval, mode=StopWatch()
    )
    engine = _run(lambda: _build_engine(config, finished))

    if ticks is not None:
        counted = 0

        def stop_after_ticks(_seconds: float) -> None:
            nonlocal counted
            counted += 1
            if counted >= ticks:
                engine.stop()

        engine.add_elapsed_listener(stop_after_ticks)

    _run(engine.start)
    _wait(engine, finished)


@cli.command()
@click.argument("seconds", type=float)
@timing_options
def countdown(seconds: float, interval: float, step: float, default: float) -> None:
    """Count down from SECONDS to zero."""
    finished = threading.Event()
    config = TimerConfig(
        default_value=default, effective_value=step, time_interval=interval, mode=CountDown(seconds)
    )
    engine = _run(lambda: _build_engine(config, finished))
    _run(engine.start)
    _wait(engine, finished)
