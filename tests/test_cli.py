from pathlib import Path

import pytest
from typer.testing import CliRunner

from batterystatus.cli import AppContext, app
from batterystatus.common.enums import PowerContext
from batterystatus.controller import PowerStatusService
from batterystatus.display.console import ConsoleDisplay
from batterystatus.settings.user import CONFIG_ENV_VAR, UserSettings
from batterystatus.system.protocols import render_custom_settings
from samples import ADAPTER_61W, ADAPTER_NONE, BATTERY_CHARGING, BATTERY_DISCHARGING

runner = CliRunner()


def make_context(
    battery: str = BATTERY_DISCHARGING,
    adapter: str = ADAPTER_NONE,
    low_power: str = render_custom_settings(False, False),
    deny: list[PowerContext] | None = None,
) -> AppContext:
    settings = UserSettings()
    return AppContext(
        settings=settings,
        service=PowerStatusService.create_for_testing(
            battery=battery, adapter=adapter, low_power=low_power, deny=deny, settings=settings
        ),
        display=ConsoleDisplay(open_settings=False),
    )


@pytest.fixture(autouse=True)
def no_ambient_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(UserSettings, "DEFAULT_CONFIG_PATHS", [tmp_path / "missing.yaml"])


def test_status_discharging() -> None:
    result = runner.invoke(app, ["status"], obj=make_context())
    assert result.exit_code == 0
    assert "35% - discharging" in result.output
    assert "2h10m remaining" in result.output
    assert "Low Power Mode: Never" in result.output


def test_status_charging_shows_wattage() -> None:
    result = runner.invoke(
        app,
        ["status"],
        obj=make_context(battery=BATTERY_CHARGING, adapter=ADAPTER_61W),
    )
    assert result.exit_code == 0
    assert "62% - charging (61.0W)" in result.output
    assert "1h5m until fully charged" in result.output


def test_status_unparseable_report_fails() -> None:
    result = runner.invoke(app, ["status"], obj=make_context(battery="garbage"))
    assert result.exit_code == 1
    assert "35%" not in result.output


def test_low_power_mode_set() -> None:
    ctx = make_context()
    result = runner.invoke(app, ["low-power", "onlyonbattery"], obj=ctx)

    assert result.exit_code == 0
    assert "Low Power Mode: Only on Battery" in result.output
    assert "Low Power Mode set to Only on Battery" in result.output
    assert ctx.service.policy_controller.current_policy().battery_flag is True


def test_low_power_mode_denied() -> None:
    ctx = make_context(deny=[PowerContext.AC])
    result = runner.invoke(app, ["low-power", "Always"], obj=ctx)

    assert result.exit_code == 1
    # the battery write went through before the AC write was refused
    assert "Low Power Mode: Only on Battery" in result.output


def test_low_power_rejects_unknown_mode() -> None:
    result = runner.invoke(app, ["low-power", "sometimes"], obj=make_context())
    assert result.exit_code == 2


def test_config_validate(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("refresh_seconds: 15\n")
    result = runner.invoke(app, ["config", "validate", str(cfg)])
    assert result.exit_code == 0
    assert "Config valid" in result.output


def test_config_validate_invalid(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("critical_battery_percent: 60\nlow_battery_percent: 30\n")
    result = runner.invoke(app, ["config", "validate", str(cfg)])
    assert result.exit_code == 1


def test_config_show(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("refresh_seconds: 15\n")
    result = runner.invoke(app, ["config", "show", "--config", str(cfg)])
    assert result.exit_code == 0
    assert "refresh_seconds: 15.0" in result.output
    assert "pmset_path: /usr/bin/pmset" in result.output


def test_missing_config_exits_with_usage_code(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "status"])
    assert result.exit_code == 2


def test_config_show_uses_global_config(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("refresh_seconds: 12\n")
    result = runner.invoke(app, ["--config", str(cfg), "config", "show"])
    assert result.exit_code == 0
    assert "refresh_seconds: 12.0" in result.output


def test_config_show_own_option_wins(tmp_path: Path) -> None:
    global_cfg = tmp_path / "global.yaml"
    global_cfg.write_text("refresh_seconds: 12\n")
    local_cfg = tmp_path / "local.yaml"
    local_cfg.write_text("refresh_seconds: 7\n")
    result = runner.invoke(
        app, ["-c", str(global_cfg), "config", "show", "--config", str(local_cfg)]
    )
    assert result.exit_code == 0
    assert "refresh_seconds: 7.0" in result.output
