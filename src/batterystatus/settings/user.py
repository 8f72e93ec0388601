"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

# Load environment variables from .env file(s)
load_dotenv()

CONFIG_ENV_VAR = "BATTERYSTATUS_CONFIG"


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """User settings for polling, system commands and display thresholds.

    Every field has a default, so the application runs without a config
    file; values in config.yaml override them.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("config.yaml"),
        Path("~/.config/batterystatus/config.yaml").expanduser(),
        Path("/etc/batterystatus/config.yaml"),
    ]

    # Polling
    refresh_seconds: float = Field(30.0, gt=0, description="Seconds between status refreshes")
    query_timeout_seconds: float = Field(
        5.0, gt=0, description="Timeout for each read-only pmset query"
    )
    write_timeout_seconds: float = Field(
        60.0,
        gt=0,
        description="Timeout for each privileged write, including the authorization prompt",
    )
    parallel_queries: bool = Field(
        True, description="Run the three status queries of a refresh concurrently"
    )

    # System commands
    pmset_path: str = Field("/usr/bin/pmset", min_length=1, description="pmset executable")
    sudo_path: str = Field("sudo", min_length=1, description="sudo executable")

    # Authorization denial
    manual_settings_url: str = Field(
        "x-apple.systempreferences:com.apple.preference.battery",
        description="Settings pane opened when a low power mode change is refused",
    )
    open_settings_on_denial: bool = True

    # Display thresholds
    critical_battery_percent: int = Field(
        20, ge=0, le=100, description="Battery % at or below which the status shows as critical"
    )
    low_battery_percent: int = Field(
        50, ge=0, le=100, description="Battery % at or below which the status shows as low"
    )

    @model_validator(mode="after")
    def check_thresholds(self) -> UserSettings:
        if self.low_battery_percent <= self.critical_battery_percent:
            raise ValueError("low_battery_percent must be above critical_battery_percent")
        return self

    @classmethod
    def find_config(cls) -> Path | None:
        """Locate a config file from the environment or default paths.

        Raises:
            FileNotFoundError: If BATTERYSTATUS_CONFIG names a missing file
        """
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)
            if not path.exists():
                raise FileNotFoundError(f"Config file from {CONFIG_ENV_VAR} not found: {path}")
            return path

        for default_path in cls.DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                return default_path
        return None

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations
                if None and falls back to defaults when nothing is found)

        Returns:
            Validated UserSettings object

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        if path is None:
            path = cls.find_config()
            if path is None:
                return cls()
        elif not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw) or {}
        except Exception as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
