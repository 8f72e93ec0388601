"""Low power mode policy model and its truth table."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field

from batterystatus.common.enums import LowPowerMode, PowerContext

_MODE_BY_FLAGS: dict[tuple[bool, bool], LowPowerMode] = {
    (False, False): LowPowerMode.NEVER,
    (True, True): LowPowerMode.ALWAYS,
    (True, False): LowPowerMode.ONLY_ON_BATTERY,
    (False, True): LowPowerMode.ONLY_ON_POWER_ADAPTER,
}
_FLAGS_BY_MODE: dict[LowPowerMode, tuple[bool, bool]] = {
    mode: flags for flags, mode in _MODE_BY_FLAGS.items()
}


def mode_of(battery_flag: bool, ac_flag: bool) -> LowPowerMode:
    """Return the named mode for a (battery, AC) flag pair."""
    return _MODE_BY_FLAGS[(bool(battery_flag), bool(ac_flag))]


def flags_of(mode: LowPowerMode) -> tuple[bool, bool]:
    """Return the (battery, AC) flag pair that realises *mode*."""
    return _FLAGS_BY_MODE[mode]


class LowPowerPolicy(BaseModel):
    """Low power mode configuration as persisted by the system.

    The two flags are independent; ``mode`` is derived from them.
    """

    model_config = ConfigDict(frozen=True)

    battery_flag: bool = False
    ac_flag: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def mode(self) -> LowPowerMode:
        """Named mode for the current flag pair."""
        return mode_of(self.battery_flag, self.ac_flag)

    @property
    def active(self) -> bool:
        """Return True if low power mode is enabled in either context."""
        return self.battery_flag or self.ac_flag

    def flag_for(self, context: PowerContext) -> bool:
        """Return the flag for one power context."""
        return self.battery_flag if context is PowerContext.BATTERY else self.ac_flag

    def with_flag(self, context: PowerContext, enabled: bool) -> LowPowerPolicy:
        """Return a copy with one context's flag replaced."""
        if context is PowerContext.BATTERY:
            return LowPowerPolicy(battery_flag=enabled, ac_flag=self.ac_flag)
        return LowPowerPolicy(battery_flag=self.battery_flag, ac_flag=enabled)

    @classmethod
    def from_mode(cls, mode: LowPowerMode) -> LowPowerPolicy:
        """Build the policy that realises *mode*."""
        battery, ac = flags_of(mode)
        return cls(battery_flag=battery, ac_flag=ac)
