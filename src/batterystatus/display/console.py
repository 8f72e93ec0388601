"""Terminal rendering of battery status for the CLI."""

from __future__ import annotations

import logging
import webbrowser
from typing import Final

import typer

from batterystatus.common.enums import BatteryLevel, ChargeState
from batterystatus.policy.errors import PolicyError
from batterystatus.scheduling.models import RefreshSnapshot
from batterystatus.status.models import PowerStatus

logger: Final = logging.getLogger(__name__)

DENIAL_MESSAGE: Final = (
    "Authorization is required to toggle Low Power Mode. "
    "Please change it manually in System Settings."
)

LEVEL_COLORS: Final[dict[BatteryLevel, str | None]] = {
    BatteryLevel.CHARGING: typer.colors.YELLOW,
    BatteryLevel.CHARGED: typer.colors.GREEN,
    BatteryLevel.CRITICAL: typer.colors.RED,
    BatteryLevel.LOW: typer.colors.BRIGHT_YELLOW,
    BatteryLevel.NORMAL: None,
}


def classify_level(status: PowerStatus, critical: int = 20, low: int = 50) -> BatteryLevel:
    """Classify *status* for colouring.

    Charging and charged win over the charge level; otherwise the
    percentage is compared against the critical and low thresholds.
    """
    if status.charge_state is ChargeState.CHARGING:
        return BatteryLevel.CHARGING
    if status.charge_state is ChargeState.CHARGED:
        return BatteryLevel.CHARGED
    if status.percentage <= critical:
        return BatteryLevel.CRITICAL
    if status.percentage <= low:
        return BatteryLevel.LOW
    return BatteryLevel.NORMAL


class ConsoleDisplay:
    """StatusDisplay that writes to the terminal via typer."""

    def __init__(
        self,
        manual_settings_url: str = "",
        open_settings: bool = True,
        critical_percent: int = 20,
        low_percent: int = 50,
    ) -> None:
        """Initialize console display.

        Args:
            manual_settings_url: Settings pane to open on a refused change
            open_settings: Whether to open the pane automatically
            critical_percent: Threshold for the critical colour
            low_percent: Threshold for the low colour
        """
        self.manual_settings_url = manual_settings_url
        self.open_settings = open_settings
        self.critical_percent = critical_percent
        self.low_percent = low_percent

    def publish(self, snapshot: RefreshSnapshot) -> None:
        if snapshot.is_loading:
            return

        if snapshot.error is not None:
            typer.secho(f"Error: {snapshot.error.message}", fg=typer.colors.RED, err=True)
            return

        if snapshot.status is not None:
            level = classify_level(snapshot.status, self.critical_percent, self.low_percent)
            typer.secho(snapshot.status.display_title, fg=LEVEL_COLORS[level], bold=True)
            if snapshot.status.display_subtitle:
                typer.echo(f"  {snapshot.status.display_subtitle}")

        if snapshot.policy is not None:
            typer.echo(f"Low Power Mode: {snapshot.policy.mode.label}")

    def notify(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.GREEN)

    def request_manual_settings(self, error: PolicyError) -> None:
        typer.secho(DENIAL_MESSAGE, fg=typer.colors.RED, err=True)
        if not (self.open_settings and self.manual_settings_url):
            return

        try:
            webbrowser.open(self.manual_settings_url)
        except Exception as exc:
            logger.debug("Could not open settings pane: %s", exc)
