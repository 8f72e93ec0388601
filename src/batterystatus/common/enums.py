from __future__ import annotations

from enum import Enum


class ChargeState(str, Enum):
    """Direction of current power flow as reported by ``pmset -g batt``.

    ``"finishing charge"`` has no member of its own; the parser folds it
    into CHARGED.
    """

    CHARGING = "charging"
    DISCHARGING = "discharging"
    CHARGED = "charged"

    @classmethod
    def from_text(cls, text: str) -> ChargeState:
        """Map a raw state token to a member (case-insensitive)."""
        token = text.strip().lower()
        if token == "finishing charge":
            return cls.CHARGED
        return cls(token)


class LowPowerMode(str, Enum):
    """Named low power mode configuration across both power contexts."""

    NEVER = "Never"
    ALWAYS = "Always"
    ONLY_ON_BATTERY = "OnlyOnBattery"
    ONLY_ON_POWER_ADAPTER = "OnlyOnPowerAdapter"

    @property
    def label(self) -> str:
        """Human readable label (e.g. ``Only on Battery``)."""
        return {
            LowPowerMode.NEVER: "Never",
            LowPowerMode.ALWAYS: "Always",
            LowPowerMode.ONLY_ON_BATTERY: "Only on Battery",
            LowPowerMode.ONLY_ON_POWER_ADAPTER: "Only on Power Adapter",
        }[self]


class PowerContext(str, Enum):
    """Power source context a low power flag applies to."""

    BATTERY = "battery"
    AC = "ac"

    @property
    def pmset_flag(self) -> str:
        """``pmset`` switch selecting this context."""
        return "-b" if self is PowerContext.BATTERY else "-c"

    @property
    def section_header(self) -> str:
        """Section header used by ``pmset -g custom``."""
        return "Battery Power:" if self is PowerContext.BATTERY else "AC Power:"


class RefreshState(Enum):
    """Refresh loop states."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class BatteryLevel(Enum):
    """Coarse battery classification used to pick a status colour."""

    CHARGING = "charging"
    CHARGED = "charged"
    CRITICAL = "critical"
    LOW = "low"
    NORMAL = "normal"
