"""Timer core — a pure reducer driving the countdown state machine.

The event loop owns a single :class:`TimerState` and replaces it with the
result of :func:`update` for every event it receives.  ``update`` performs no
I/O: anything that must happen outside the model (arming the next tick,
quitting) is returned as a command for the caller to execute.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0  # seconds
MAX_INPUT_LENGTH = 5
VALIDATION_MESSAGE = "Please enter a valid positive number"

_ZERO = timedelta(0)
_ONE_SECOND = timedelta(seconds=1)
_MINUTES_PATTERN = re.compile(r"[+-]?[0-9]+")


class Phase(Enum):
    """Possible phases of the timer."""

    AWAITING_INPUT = "awaiting_input"
    RUNNING = "running"


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the timer model.

    Raises ``ValueError`` on construction if the snapshot is inconsistent.
    """

    phase: Phase = Phase.AWAITING_INPUT
    input_buffer: str = ""
    validation_error: str | None = None
    total_duration: timedelta = _ZERO
    remaining: timedelta = _ZERO
    completed: bool = False

    def __post_init__(self) -> None:
        if not (_ZERO <= self.remaining <= self.total_duration):
            raise ValueError(
                f"remaining must be between 0 and {self.total_duration}, got {self.remaining}"
            )
        if self.completed and self.remaining:
            raise ValueError(f"completed timer must have no time remaining, got {self.remaining}")
        if self.phase == Phase.AWAITING_INPUT and (self.total_duration or self.completed):
            raise ValueError("timer awaiting input must not have a duration")

    @property
    def elapsed(self) -> timedelta:
        """Time counted down so far."""
        return self.total_duration - self.remaining


# -- events ------------------------------------------------------------------


@dataclass(frozen=True)
class TextChanged:
    """The input field now holds *value*."""

    value: str


@dataclass(frozen=True)
class Submit:
    """The confirm key was pressed."""


@dataclass(frozen=True)
class Cancel:
    """The quit or escape key was pressed."""


@dataclass(frozen=True)
class Tick:
    """One second has passed."""


Event = Union[TextChanged, Submit, Cancel, Tick]


# -- commands ----------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleTick:
    """Deliver a :class:`Tick` after *delay* seconds."""

    delay: float = TICK_INTERVAL


@dataclass(frozen=True)
class Quit:
    """End the session."""


Command = Union[ScheduleTick, Quit]


# -- public interface --------------------------------------------------------


def initial_state() -> TimerState:
    """Return the state the session starts in."""
    return TimerState()


def initial_commands() -> list[Command]:
    """Return the commands to run at start-up.

    The clock is armed immediately, before any duration is submitted.
    """
    return [ScheduleTick()]


def parse_minutes(text: str) -> int:
    """Parse *text* as a positive whole number of minutes.

    Surrounding whitespace is ignored.  Raises ``ValueError`` for anything
    else, including fractions, zero, negatives and the empty string.
    """
    stripped = text.strip()
    if not _MINUTES_PATTERN.fullmatch(stripped):
        raise ValueError(VALIDATION_MESSAGE)
    minutes = int(stripped)
    if minutes <= 0:
        raise ValueError(VALIDATION_MESSAGE)
    try:
        timedelta(minutes=minutes)
    except OverflowError as exc:
        raise ValueError(VALIDATION_MESSAGE) from exc
    return minutes


def update(state: TimerState, event: Event) -> tuple[TimerState, list[Command]]:
    """Apply *event* to *state*, returning the new state and follow-up commands."""
    if isinstance(event, Cancel):
        logger.debug("Cancel received in %s phase", state.phase.value)
        return state, [Quit()]
    if isinstance(event, Tick):
        return _tick(state), [ScheduleTick()]
    if isinstance(event, TextChanged):
        return _edit(state, event.value), []
    if isinstance(event, Submit):
        return _submit(state), []
    raise TypeError(f"unsupported event: {type(event).__name__}")


# -- private helpers ---------------------------------------------------------


def _edit(state: TimerState, value: str) -> TimerState:
    if state.phase != Phase.AWAITING_INPUT:
        return state
    value = value[:MAX_INPUT_LENGTH]
    if value == state.input_buffer:
        return state
    return replace(state, input_buffer=value, validation_error=None)


def _submit(state: TimerState) -> TimerState:
    if state.phase != Phase.AWAITING_INPUT:
        return state
    try:
        minutes = parse_minutes(state.input_buffer)
    except ValueError as exc:
        logger.info("Rejected duration %r", state.input_buffer)
        return replace(state, validation_error=str(exc))

    duration = timedelta(minutes=minutes)
    logger.debug("Starting countdown of %d minutes", minutes)
    return replace(
        state,
        phase=Phase.RUNNING,
        validation_error=None,
        total_duration=duration,
        remaining=duration,
    )


def _tick(state: TimerState) -> TimerState:
    if state.phase != Phase.RUNNING or not state.remaining:
        return state
    remaining = max(state.remaining - _ONE_SECOND, _ZERO)
    if remaining:
        return replace(state, remaining=remaining)
    logger.debug("Countdown of %s completed", state.total_duration)
    return replace(state, remaining=remaining, completed=True)
