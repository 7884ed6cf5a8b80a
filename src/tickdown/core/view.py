"""View renderer — maps a :class:`TimerState` to a frame of styled lines."""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style
from rich.text import Text

from tickdown.core.duration import format_duration
from tickdown.core.timer import Phase, TimerState

BAR_WIDTH = 40
PLACEHOLDER = "Enter minutes..."

STATUS_HIGHLIGHT = "status-highlight"
SUCCESS_HIGHLIGHT = "success-highlight"
ALERT = "alert"

ROLE_STYLES: dict[str, Style] = {
    STATUS_HIGHLIGHT: Style(color="bright_yellow", bold=True),
    SUCCESS_HIGHLIGHT: Style(color="bright_green", bold=True),
    ALERT: Style(color="bright_red"),
}

_FILLED_CELL = "█"
_EMPTY_CELL = "░"
_FILLED_STYLE = Style(color="green")
_EMPTY_STYLE = Style(dim=True)
_PLACEHOLDER_STYLE = Style(dim=True)


@dataclass(frozen=True)
class Frame:
    """An ordered sequence of lines ready to be drawn.

    ``input_index`` is the line occupied by the live input field, or ``None``
    when no input field is shown.
    """

    lines: tuple[Text, ...]
    input_index: int | None = None

    @property
    def plain(self) -> str:
        """The frame as unstyled text."""
        return "\n".join(line.plain for line in self.lines)

    def split(self) -> tuple[Text, Text]:
        """Return the lines above and below the input field, each joined."""
        if self.input_index is None:
            return _join(self.lines), Text()
        return (
            _join(self.lines[: self.input_index]),
            _join(self.lines[self.input_index + 1 :]),
        )


def progress_fraction(state: TimerState) -> float:
    """Fraction of the total duration already elapsed, in ``[0, 1]``."""
    if not state.total_duration:
        return 0.0
    return state.elapsed / state.total_duration


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.1f}%"


def progress_bar(fraction: float, width: int = BAR_WIDTH) -> Text:
    """Render a solid bar *width* cells wide, filled to *fraction*."""
    filled = min(max(int(fraction * width + 0.5), 0), width)
    bar = Text(_FILLED_CELL * filled, style=_FILLED_STYLE)
    bar.append(_EMPTY_CELL * (width - filled), style=_EMPTY_STYLE)
    return bar


def render(state: TimerState) -> Frame:
    """Build the frame for *state*.  Never modifies *state*."""
    if state.phase == Phase.AWAITING_INPUT:
        return _render_input(state)
    return _render_running(state)


# -- private helpers ---------------------------------------------------------


def _join(lines: tuple[Text, ...]) -> Text:
    return Text("\n").join(lines)


def _render_input(state: TimerState) -> Frame:
    if state.input_buffer:
        field = Text(state.input_buffer)
    else:
        field = Text(PLACEHOLDER, style=_PLACEHOLDER_STYLE)

    lines = [Text(), Text("Enter timer duration in minutes:"), Text()]
    input_index = len(lines)
    lines += [field, Text()]
    if state.validation_error:
        lines += [Text(state.validation_error, style=ROLE_STYLES[ALERT]), Text()]
    lines.append(Text("Press Enter to start, Esc to quit"))
    return Frame(tuple(lines), input_index)


def _render_running(state: TimerState) -> Frame:
    fraction = progress_fraction(state)
    percent = format_percent(fraction)
    elapsed = state.elapsed
    total = state.total_duration

    progress = progress_bar(fraction)
    progress.append(" " * (BAR_WIDTH - len(percent)))
    progress.append(percent, style=ROLE_STYLES[STATUS_HIGHLIGHT])

    lines = [
        Text(),
        Text.assemble(
            "Time remaining: ",
            (format_duration(state.remaining), ROLE_STYLES[STATUS_HIGHLIGHT]),
        ),
        Text(),
        progress,
        Text(),
    ]
    if state.completed:
        lines += [Text("Done!", style=ROLE_STYLES[SUCCESS_HIGHLIGHT]), Text()]
    lines += [
        Text(f"Elapsed: {format_duration(elapsed)} / Total: {format_duration(total)}"),
        Text(f"Seconds: {elapsed.total_seconds():.0f} / {total.total_seconds():.0f}"),
        Text(),
        Text("Press Esc to quit"),
    ]
    return Frame(tuple(lines))
