"""
Helper functions for formatting data into human-readable strings.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

UNDEFINED = "__undefined__"

_SIZE_UNITS = ["B", "KB", "MB", "GB"]


def format_number(value: int | float) -> str:
    """Renders a number without a trailing '.0' when it is integral."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def convert_bytes(bytes_size: int | float) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    num = bytes_size
    i = 0
    while abs(num) >= 1024 and i < len(_SIZE_UNITS) - 1:
        num /= 1024
        i += 1
    # ties round up, so 1280 B is 1.3 KB
    rounded = Decimal(num).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded} {_SIZE_UNITS[i]}"


def convert_seconds(seconds: int | float) -> str:
    """
    Formats a duration in seconds as 'H:MM:SS'.

    Hours are not capped and the seconds component is not floored, so a
    fractional input keeps its fraction (e.g. 61.5 -> '0:01:1.5').
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = format_number(seconds % 60)
    return f"{hours}:{minutes:02d}:{secs.rjust(2, '0')}"


def format_value(value: Any) -> str:
    """Renders a scalar for a text report, substituting the placeholder when absent."""
    if value is None or value == "":
        return UNDEFINED
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def format_languages(languages: tuple[str, ...] | list[str]) -> str:
    """Joins a list of language codes with a comma and a space."""
    return ", ".join(str(language) for language in languages)


def format_duration(seconds: float) -> str:
    """
    Formats an elapsed time in seconds into a short string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
