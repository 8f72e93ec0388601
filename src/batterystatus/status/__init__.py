"""Power-state parsing and the status record it produces."""

from batterystatus.status.errors import (
    BatteryStatusError,
    FetchError,
    ParseError,
    ParseFailure,
    QueryError,
)
from batterystatus.status.models import PowerStatus, RemainingTime
from batterystatus.status.parser import parse_power_status

__all__ = [
    "BatteryStatusError",
    "FetchError",
    "ParseError",
    "ParseFailure",
    "PowerStatus",
    "QueryError",
    "RemainingTime",
    "parse_power_status",
]
