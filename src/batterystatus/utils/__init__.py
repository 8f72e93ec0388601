"""Common utility functions and helpers for the batterystatus package."""

from batterystatus.utils.formatting import (
    format_duration,
    format_percentage,
    format_remaining_time,
    format_wattage,
)

__all__ = [
    "format_duration",
    "format_percentage",
    "format_remaining_time",
    "format_wattage",
]
