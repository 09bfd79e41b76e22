"""Shared formatting helpers for throughput display.

Example:
    >>> from monitor.utils import format_rate
    >>> format_rate(1536)
    '1.5 KB/s'
    >>> format_rate(-3)
    '0.0 B/s'
"""

from __future__ import annotations

from typing import Union

from config import NETWORK, UI

# Type alias for numeric values
NumericValue = Union[int, float]


def format_rate(bytes_per_sec: NumericValue) -> str:
    """Format a byte rate as a human-readable string.

    Negative readings, which rate counters can report transiently, are
    treated as zero. The value is scaled by 1024 through B/s, KB/s, MB/s
    and GB/s; anything larger stays in GB/s.

    Args:
        bytes_per_sec: Rate in bytes per second.

    Returns:
        String like "1023.0 B/s" or "1.0 KB/s".

    Examples:
        >>> format_rate(1023)
        '1023.0 B/s'
        >>> format_rate(1024)
        '1.0 KB/s'
        >>> format_rate(1024 ** 4)
        '1024.0 GB/s'
    """
    units = NETWORK.RATE_UNITS
    value = max(0.0, float(bytes_per_sec))
    unit_index = 0

    while value >= NETWORK.UNIT_BASE and unit_index < len(units) - 1:
        value /= NETWORK.UNIT_BASE
        unit_index += 1

    return f"{value:.1f} {units[unit_index]}"


def truncate_tooltip(text: str) -> str:
    """Clamp tooltip text to the tray limit.

    Text longer than ``UI.TOOLTIP_MAX_LENGTH`` keeps its first
    ``UI.TOOLTIP_TRUNCATE_AT`` characters followed by "...".
    """
    if len(text) > UI.TOOLTIP_MAX_LENGTH:
        return text[:UI.TOOLTIP_TRUNCATE_AT] + "..."
    return text


__all__ = ["NumericValue", "format_rate", "truncate_tooltip"]
