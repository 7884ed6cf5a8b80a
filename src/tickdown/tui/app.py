"""Event loop — a textual app that feeds terminal events to the timer reducer.

The app holds the only :class:`TimerState`.  Key presses, input-field edits
and clock ticks are turned into timer events, the reducer's commands are
carried out here, and the resulting frame is drawn around the input field.
"""

from __future__ import annotations

import logging

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Input, Static

from tickdown.core.timer import (
    MAX_INPUT_LENGTH,
    Cancel,
    Command,
    Event,
    Quit,
    ScheduleTick,
    Submit,
    TextChanged,
    Tick,
    TimerState,
    initial_commands,
    initial_state,
    update,
)
from tickdown.core.view import PLACEHOLDER, Frame, render

logger = logging.getLogger(__name__)

INPUT_WIDTH = 20


class SessionError(Exception):
    """Raised when the terminal session fails to start or run."""


class TimerApp(App[None]):
    """Full-screen countdown timer."""

    CSS = f"""
    Screen {{
        padding: 1 2;
    }}

    #above, #below {{
        height: auto;
    }}

    #minutes {{
        width: {INPUT_WIDTH};
        height: 1;
        border: none;
        padding: 0;
    }}
    """

    BINDINGS = [
        Binding("escape", "cancel", "Quit", priority=True),
        Binding("ctrl+c", "cancel", "Quit", show=False, priority=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.timer_state: TimerState = initial_state()
        self.current_frame: Frame = render(self.timer_state)
        self._cancelled = False

    def compose(self) -> ComposeResult:
        yield Static(id="above")
        yield Input(placeholder=PLACEHOLDER, max_length=MAX_INPUT_LENGTH, id="minutes")
        yield Static(id="below")

    def on_mount(self) -> None:
        self._execute(initial_commands())
        self._draw()
        self.query_one("#minutes", Input).focus()

    def feed(self, event: Event) -> None:
        """Apply *event* to the timer and redraw.  Ignored once cancelled."""
        if self._cancelled:
            return
        self.timer_state, commands = update(self.timer_state, event)
        self._execute(commands)
        if not self._cancelled:
            self._draw()

    @on(Input.Changed, "#minutes")
    def minutes_changed(self, event: Input.Changed) -> None:
        self.feed(TextChanged(event.value))

    @on(Input.Submitted, "#minutes")
    def minutes_submitted(self) -> None:
        self.feed(Submit())

    def action_cancel(self) -> None:
        self.feed(Cancel())

    # -- private helpers -----------------------------------------------------

    def _deliver_tick(self) -> None:
        self.feed(Tick())

    def _execute(self, commands: list[Command]) -> None:
        for command in commands:
            if isinstance(command, Quit):
                self._cancelled = True
                self.exit()
            elif isinstance(command, ScheduleTick):
                self.set_timer(command.delay, self._deliver_tick)

    def _draw(self) -> None:
        frame = self.current_frame = render(self.timer_state)
        above, below = frame.split()
        self.query_one("#above", Static).update(above)
        self.query_one("#below", Static).update(below)
        self.query_one("#minutes", Input).display = frame.input_index is not None


def run_session(app: TimerApp | None = None) -> None:
    """Run the interactive session until the user quits.

    Raises :class:`SessionError` if the terminal session cannot be started or
    ends abnormally.
    """
    app = app if app is not None else TimerApp()
    try:
        app.run()
    except Exception as exc:
        logger.exception("Terminal session failed")
        raise SessionError(str(exc) or type(exc).__name__) from exc
    if app.return_code:
        logger.error("Terminal session exited with code %s", app.return_code)
        raise SessionError(f"terminal session exited with code {app.return_code}")
