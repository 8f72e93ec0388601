"""Text and number formatting utilities."""

from __future__ import annotations

from decimal import Decimal


def format_percentage(value: int) -> str:
    """Format a charge level as a percentage.

    Args:
        value: Charge level (0-100)

    Returns:
        Formatted percentage string
    """
    return f"{value}%"


def format_wattage(watts: Decimal) -> str:
    """Format charger wattage, keeping the precision it was reported with.

    Args:
        watts: Charger wattage

    Returns:
        Formatted wattage string (e.g. ``61.0W``)
    """
    return f"{watts}W"


def format_duration(hours: int, minutes: int) -> str:
    """Format an hours/minutes pair in compact form.

    Zero hours gives ``"45m"``, zero minutes gives ``"2h"``, anything
    else ``"1h30m"``.

    Args:
        hours: Whole hours
        minutes: Minutes past the hour

    Returns:
        Compact duration string
    """
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h{minutes}m"


def format_remaining_time(time: str) -> str:
    """Format an ``H:MM`` token (e.g. ``"1:30"`` -> ``"1h30m"``).

    Raises:
        ValueError: If the token is not ``H:MM``
    """
    hours, _, minutes = time.strip().partition(":")
    return format_duration(int(hours), int(minutes))
