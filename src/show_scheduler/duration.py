"""
Duration parsing and formatting.

Library durations arrive as raw seconds, "M:SS", "H:MM:SS" or spreadsheet
fractional-day decimals. Everything is normalised to whole seconds; nothing
in here raises on bad input.
"""

import math
import re
from decimal import Decimal
from typing import Any, Optional, Union

SECONDS_PER_DAY = 24 * 60 * 60
NO_DURATION = "-"

_SHORT_TIME = re.compile(r'^(\d{1,2}):(\d{2})$')
_LONG_TIME = re.compile(r'^(\d{1,2}):(\d{2}):(\d{2})$')
_PLAIN_NUMBER = re.compile(r'^(\d+\.?\d*)$')

DURATION_COLUMN_HINTS = ("runtime", "duration", "time", "runs")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _seconds_from_number(value: float) -> int:
    if math.isnan(value) or math.isinf(value):
        return 0
    # Spreadsheet time cell, e.g. 0.04167 == 1 hour
    if 0 < value < 1:
        return _round_half_up(value * SECONDS_PER_DAY)
    return max(0, _round_half_up(value))


def parse_duration_to_seconds(value: Any) -> int:
    """Parse any supported duration representation into whole seconds.

    Args:
        value: int/float/Decimal seconds or fractional day, or a string in
            "M:SS", "H:MM:SS" or plain-number form. None, empty and garbage
            values are accepted.

    Returns:
        Non-negative integer seconds; 0 when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, (int, float, Decimal)):
        try:
            return _seconds_from_number(float(value))
        except (ValueError, OverflowError):
            return 0

    if not isinstance(value, str):
        return 0

    trimmed = value.strip()
    if not trimmed:
        return 0

    match = _SHORT_TIME.match(trimmed)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = _LONG_TIME.match(trimmed)
    if match:
        return int(match.group(1)) * 3600 + int(match.group(2)) * 60 + int(match.group(3))

    match = _PLAIN_NUMBER.match(trimmed)
    if match:
        try:
            return _seconds_from_number(float(match.group(1)))
        except OverflowError:
            return 0

    return 0


def format_duration_display(value: Any) -> str:
    """Format a duration as "M:SS" (minutes are not wrapped into hours).

    Zero or unparsable durations render as "-".
    """
    seconds = parse_duration_to_seconds(value)
    if seconds <= 0:
        return NO_DURATION

    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}:{remaining:02d}"


def format_time(seconds: Union[int, float]) -> str:
    """Format a clock position as "H:MM:SS" once past the hour, else "M:SS".

    Unlike format_duration_display, zero renders as "0:00".
    """
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, remaining = divmod(rest, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{remaining:02d}"
    return f"{minutes}:{remaining:02d}"


def format_long_duration(seconds: Union[int, float]) -> str:
    """Like format_time, but non-positive durations render as "-"."""
    if seconds <= 0:
        return NO_DURATION
    return format_time(seconds)


def is_duration_column(column_name: str) -> bool:
    """Check whether a spreadsheet/table column holds duration data."""
    lower_name = column_name.lower()
    return any(hint in lower_name for hint in DURATION_COLUMN_HINTS)


def get_cell_display_value(value: Any, column_name: str) -> str:
    """Display string for a table cell, applying duration formatting where relevant."""
    if value is None or value == "":
        return NO_DURATION

    if is_duration_column(column_name):
        return format_duration_display(value)

    return str(value)


def parse_display_value_for_storage(display_value: str, column_name: str) -> Optional[Any]:
    """Convert an edited display value back to its storage form.

    Durations typed as "M:SS" are stored as seconds; other numeric text is
    stored as a number; everything else is stored verbatim.
    """
    if not display_value or display_value == NO_DURATION:
        return None

    if is_duration_column(column_name):
        match = _SHORT_TIME.match(display_value.strip())
        if match:
            return int(match.group(1)) * 60 + int(match.group(2))
        try:
            return float(display_value)
        except ValueError:
            pass

    return display_value
