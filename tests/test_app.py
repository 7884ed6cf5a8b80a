"""Tests for the textual event loop.

Each scenario drives a headless ``TimerApp`` through textual's pilot.  The
start-up tick is suppressed so scenarios are not affected by wall-clock time;
ticks are fed directly instead.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Awaitable, Callable
from unittest.mock import MagicMock, patch

import pytest
from textual.pilot import Pilot
from textual.widgets import Input

from tickdown.core.timer import VALIDATION_MESSAGE, Phase, ScheduleTick, Tick
from tickdown.tui.app import SessionError, TimerApp, run_session


def _drive(scenario: Callable[[TimerApp, Pilot], Awaitable[None]]) -> TimerApp:
    """Run *scenario* against a headless app and return the app."""
    app = TimerApp()

    async def main() -> None:
        async with app.run_test() as pilot:
            await scenario(app, pilot)

    with patch("tickdown.tui.app.initial_commands", return_value=[]):
        asyncio.run(main())
    return app


def _text(app: TimerApp, part: int) -> str:
    """Return the drawn text above (0) or below (1) the input field."""
    return app.current_frame.split()[part].plain


# ---------------------------------------------------------------------------
# Awaiting input
# ---------------------------------------------------------------------------


class TestAwaitingInput:
    """Typing goes to the input field; Enter submits it."""

    def test_initial_screen(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.pause()
            assert "Enter timer duration in minutes:" in _text(app, 0)
            assert "Press Enter to start, Esc to quit" in _text(app, 1)
            assert app.query_one("#minutes", Input).display

        _drive(scenario)

    def test_typing_fills_buffer(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("1", "2")
            await pilot.pause()
            assert app.timer_state.input_buffer == "12"

        _drive(scenario)

    def test_invalid_submission_shows_error(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("0", "enter")
            await pilot.pause()
            assert app.timer_state.phase == Phase.AWAITING_INPUT
            assert app.timer_state.validation_error == VALIDATION_MESSAGE
            assert VALIDATION_MESSAGE in _text(app, 1)

        _drive(scenario)

    def test_valid_submission_starts_countdown(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("2", "5", "enter")
            await pilot.pause()
            assert app.timer_state.phase == Phase.RUNNING
            assert app.timer_state.total_duration == timedelta(minutes=25)
            assert not app.query_one("#minutes", Input).display
            assert "Time remaining: 25:00" in _text(app, 0)

        _drive(scenario)


# ---------------------------------------------------------------------------
# Ticks
# ---------------------------------------------------------------------------


class TestTicks:
    """Each tick is fed to the reducer and the next one is armed."""

    def test_tick_counts_down_and_redraws(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("1", "enter")
            await pilot.pause()
            with patch.object(app, "set_timer") as mock_set_timer:
                app.feed(Tick())
            assert app.timer_state.remaining == timedelta(seconds=59)
            assert "Time remaining: 00:59" in _text(app, 0)
            mock_set_timer.assert_called_once_with(1.0, app._deliver_tick)

        _drive(scenario)

    def test_startup_arms_the_clock(self) -> None:
        app = TimerApp()

        async def main() -> None:
            with patch.object(TimerApp, "set_timer") as mock_set_timer:
                async with app.run_test() as pilot:
                    await pilot.pause()
                    delays = [call.args[0] for call in mock_set_timer.call_args_list]
                    assert ScheduleTick().delay in delays

        asyncio.run(main())


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


class TestCancel:
    """Escape and ctrl+c end the session cleanly from any phase."""

    @pytest.mark.parametrize("key", ["escape", "ctrl+c"])
    def test_cancel_while_awaiting_input(self, key: str) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("3")
            await pilot.pause()
            await pilot.press(key)

        app = _drive(scenario)
        assert app.return_code == 0
        assert app.timer_state.input_buffer == "3"

    def test_cancel_while_running_stops_processing(self) -> None:
        async def scenario(app: TimerApp, pilot: Pilot) -> None:
            await pilot.press("1", "enter")
            await pilot.pause()
            before = app.timer_state
            app.action_cancel()
            app.feed(Tick())
            assert app.timer_state is before

        app = _drive(scenario)
        assert app.return_code == 0
        assert app.timer_state.remaining == timedelta(minutes=1)


# ---------------------------------------------------------------------------
# run_session()
# ---------------------------------------------------------------------------


class TestRunSession:
    """run_session() converts terminal failures into SessionError."""

    def test_clean_exit(self) -> None:
        app = MagicMock(return_code=0)
        run_session(app)
        app.run.assert_called_once_with()

    def test_startup_failure_raises_session_error(self) -> None:
        app = MagicMock(return_code=None)
        app.run.side_effect = OSError("not a terminal")
        with pytest.raises(SessionError, match="not a terminal"):
            run_session(app)

    def test_nonzero_return_code_raises_session_error(self) -> None:
        app = MagicMock(return_code=1)
        with pytest.raises(SessionError, match="exited with code 1"):
            run_session(app)
