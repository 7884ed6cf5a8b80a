"""Duration formatting for the countdown display."""

from datetime import timedelta

_MICROSECONDS_PER_SECOND = 1_000_000


def to_seconds(span: timedelta) -> int:
    """Return *span* as whole seconds, rounding half away from zero.

    Raises ``ValueError`` for negative spans.
    """
    if span < timedelta(0):
        raise ValueError(f"span must be non-negative, got {span}")
    micros = span // timedelta(microseconds=1)
    seconds, remainder = divmod(micros, _MICROSECONDS_PER_SECOND)
    if remainder * 2 >= _MICROSECONDS_PER_SECOND:
        seconds += 1
    return seconds


def format_duration(span: timedelta) -> str:
    """Format *span* as ``MM:SS``, or ``HH:MM:SS`` once it reaches an hour."""
    hours, rest = divmod(to_seconds(span), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"
