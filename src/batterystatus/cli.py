"""Battery Status CLI application.

This module provides the command-line interface: a one-shot status query,
the low power mode control command, a live watch mode, and configuration
utilities.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import typer
import yaml

from batterystatus.common.enums import LowPowerMode
from batterystatus.controller import PowerStatusService
from batterystatus.display.console import ConsoleDisplay
from batterystatus.scheduling import RefreshLoop
from batterystatus.settings.user import UserSettings

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Battery status and Low Power Mode control", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "batterystatus.cli"

CONFIG_OPTION = typer.Option(None, "--config", "-c", dir_okay=False, help="Path to config.yaml")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
MODE_ARGUMENT = typer.Argument(..., case_sensitive=False, help="Low power mode to apply")
CONFIG_META_KEY: Final = "batterystatus.config_path"


@dataclass
class AppContext:
    """Objects shared by the sub-commands."""

    settings: UserSettings
    service: PowerStatusService
    display: ConsoleDisplay


def _load_settings(config: Path | None) -> UserSettings:
    try:
        return UserSettings.load(config)
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Report battery status and control Low Power Mode."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    if ctx.invoked_subcommand == "config":
        # config helpers load settings themselves; hand them the global path
        ctx.meta[CONFIG_META_KEY] = config
        return

    # Tests may pre-populate ctx.obj with a mocked service
    if isinstance(ctx.obj, AppContext):
        return

    settings = _load_settings(config)
    ctx.obj = AppContext(
        settings=settings,
        service=PowerStatusService(settings),
        display=ConsoleDisplay(
            manual_settings_url=settings.manual_settings_url,
            open_settings=settings.open_settings_on_denial,
            critical_percent=settings.critical_battery_percent,
            low_percent=settings.low_battery_percent,
        ),
    )


@app.command()
def status(ctx: typer.Context) -> None:
    """Show charge, charging state, time remaining and Low Power Mode."""
    app_ctx: AppContext = ctx.obj
    loop = RefreshLoop(app_ctx.service, app_ctx.display, app_ctx.settings.refresh_seconds)
    loop.start()
    if loop.snapshot.error is not None:
        raise typer.Exit(code=1)


@app.command("low-power")
def low_power(ctx: typer.Context, mode: LowPowerMode = MODE_ARGUMENT) -> None:
    """Set Low Power Mode: Never, Always, OnlyOnBattery or OnlyOnPowerAdapter."""
    app_ctx: AppContext = ctx.obj
    loop = RefreshLoop(app_ctx.service, app_ctx.display, app_ctx.settings.refresh_seconds)
    policy = loop.set_low_power_mode(mode)
    if policy is None or policy.mode is not mode:
        raise typer.Exit(code=1)


@app.command()
def watch(ctx: typer.Context) -> None:
    """Refresh the status periodically until interrupted."""
    app_ctx: AppContext = ctx.obj
    typer.echo("Watching battery status - press Ctrl+C to quit")
    with RefreshLoop(app_ctx.service, app_ctx.display, app_ctx.settings.refresh_seconds):
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            typer.echo("")


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("show")
def show_config(ctx: typer.Context, config: Path | None = CONFIG_OPTION):
    """Print the effective configuration as YAML.

    The sub-command's --config wins over the global one.
    """
    settings = _load_settings(config or ctx.meta.get(CONFIG_META_KEY))
    typer.echo(yaml.safe_dump(settings.model_dump(), sort_keys=False).rstrip())


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
