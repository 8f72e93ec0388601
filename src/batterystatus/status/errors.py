"""Exception classes for status queries and parsing.

This module defines the hierarchy used when reading power-management
output: failures to run a system query, failures to make sense of its
text, and the wrapper the refresh loop reports for a failed fetch.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class BatteryStatusError(Exception):
    """Base class for all batterystatus errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message


class ParseFailure(Enum):
    """Required fields that can be missing from a battery report."""

    MISSING_PERCENTAGE = "missing_percentage"
    MISSING_STATE = "missing_state"


class ParseError(BatteryStatusError):
    """Raised when a battery report lacks a required field."""

    MESSAGES = {
        ParseFailure.MISSING_PERCENTAGE: "No charge percentage in battery report",
        ParseFailure.MISSING_STATE: "No charge state in battery report",
    }

    def __init__(self, reason: ParseFailure, text: str = "") -> None:
        """Initialize with the missing field.

        Args:
            reason: Which required field was missing
            text: The raw report that failed to parse, for debugging
        """
        super().__init__(self.MESSAGES[reason])
        self.reason = reason
        self.text = text


class QueryError(BatteryStatusError):
    """Raised when a read-only system query cannot be completed.

    Covers nonzero exit status, a missing binary, I/O errors and
    timeouts alike; callers do not special-case exit codes.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: int | None = None,
        original_error: Exception | None = None,
        timed_out: bool = False,
    ) -> None:
        """Initialize with query failure details.

        Args:
            message: Description of the failure
            command: The command line that was run
            returncode: Exit status, when the process ran to completion
            original_error: The original exception that was caught
            timed_out: True if the query exceeded its timeout
        """
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.original_error = original_error
        self.timed_out = timed_out


class FetchError(BatteryStatusError):
    """Raised when a fetch cycle fails to produce a status and policy."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize with fetch failure details.

        Args:
            message: Description of the failure
            original_error: The ParseError or QueryError behind it
        """
        super().__init__(message)
        self.original_error = original_error
