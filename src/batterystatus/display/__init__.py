"""Display collaborators for battery status snapshots."""

from batterystatus.display.console import ConsoleDisplay, classify_level
from batterystatus.display.protocols import MockStatusDisplay, StatusDisplay

__all__ = [
    "ConsoleDisplay",
    "MockStatusDisplay",
    "StatusDisplay",
    "classify_level",
]
