"""Shared enumerations for batterystatus packages."""

from batterystatus.common.enums import (
    BatteryLevel,
    ChargeState,
    LowPowerMode,
    PowerContext,
    RefreshState,
)

__all__ = [
    "BatteryLevel",
    "ChargeState",
    "LowPowerMode",
    "PowerContext",
    "RefreshState",
]
