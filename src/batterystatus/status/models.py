"""Typed models for the power-supply status record."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from batterystatus.common.enums import ChargeState
from batterystatus.utils.formatting import format_duration, format_percentage, format_wattage


class RemainingTime(BaseModel):
    """Estimated time until empty (discharging) or full (charging)."""

    model_config = ConfigDict(frozen=True)

    hours: int = Field(..., ge=0)
    minutes: int = Field(..., ge=0, le=59)

    @property
    def total_minutes(self) -> int:
        """Duration expressed in minutes."""
        return self.hours * 60 + self.minutes

    def __str__(self) -> str:
        return format_duration(self.hours, self.minutes)


class PowerStatus(BaseModel):
    """Snapshot of the host's power supply.

    Built fresh on every poll from the battery and AC adapter reports.
    The display strings are derived from the parsed fields and are
    included when the model is dumped.
    """

    model_config = ConfigDict(frozen=True)

    percentage: int = Field(..., ge=0, le=100, description="Charge level (0-100)")
    charge_state: ChargeState
    remaining_time: RemainingTime | None = None
    wattage: Decimal | None = Field(None, gt=0, description="Charger wattage")

    @model_validator(mode="after")
    def check_state_consistency(self) -> PowerStatus:
        if self.charge_state is ChargeState.CHARGED and self.remaining_time is not None:
            raise ValueError("remaining_time cannot be set when the battery is charged")
        if self.charge_state is ChargeState.DISCHARGING and self.wattage is not None:
            raise ValueError("wattage cannot be set while discharging")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def wattage_info(self) -> str:
        """Charger wattage text, empty unless charging or charged."""
        if self.wattage is None or self.charge_state is ChargeState.DISCHARGING:
            return ""
        return format_wattage(self.wattage)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_info(self) -> str:
        """Remaining time text, empty when unknown or fully charged."""
        if self.remaining_time is None or self.charge_state is ChargeState.CHARGED:
            return ""
        return str(self.remaining_time)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_title(self) -> str:
        """Headline such as ``100% - charged (61.0W)``."""
        title = f"{format_percentage(self.percentage)} - {self.charge_state.value}"
        if self.wattage_info:
            title += f" ({self.wattage_info})"
        return title

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_subtitle(self) -> str:
        """Secondary line describing time to full or time to empty."""
        if self.charge_state is ChargeState.CHARGED:
            return "Fully charged"
        if not self.remaining_info:
            return ""
        if self.charge_state is ChargeState.CHARGING:
            return f"{self.remaining_info} until fully charged"
        return f"{self.remaining_info} remaining"

    @property
    def is_on_charger(self) -> bool:
        """Return True if power is flowing in or the battery sits full."""
        return self.charge_state is not ChargeState.DISCHARGING
