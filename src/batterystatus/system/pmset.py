"""``pmset`` backed power queries and low power mode writes (macOS)."""

from __future__ import annotations

import logging
import subprocess
from typing import Final

from batterystatus.common.enums import PowerContext
from batterystatus.policy.errors import PolicyError, PolicyFailure
from batterystatus.status.errors import QueryError

logger: Final = logging.getLogger(__name__)

DEFAULT_PMSET: Final = "/usr/bin/pmset"


class PmsetQueries:
    """Read-only power queries via ``pmset -g``."""

    def __init__(self, pmset_path: str = DEFAULT_PMSET, timeout: float = 5.0) -> None:
        """Initialize with the pmset binary and a per-query timeout.

        Args:
            pmset_path: Path to the pmset executable
            timeout: Seconds before a query is abandoned
        """
        self.pmset_path = pmset_path
        self.timeout = timeout

    def battery_snapshot(self) -> str:
        return self._run("batt")

    def adapter_snapshot(self) -> str:
        return self._run("ac")

    def low_power_snapshot(self) -> str:
        return self._run("custom")

    def _run(self, topic: str) -> str:
        cmd = [self.pmset_path, "-g", topic]
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise QueryError(
                f"pmset -g {topic} timed out after {self.timeout:g}s",
                command=cmd,
                original_error=exc,
                timed_out=True,
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise QueryError(
                f"pmset -g {topic} failed: {(exc.stderr or '').strip()}",
                command=cmd,
                returncode=exc.returncode,
                original_error=exc,
            ) from exc
        except OSError as exc:
            raise QueryError(
                f"Unable to run {self.pmset_path}: {exc}", command=cmd, original_error=exc
            ) from exc

        logger.debug("pmset -g %s -> %d bytes", topic, len(result.stdout))
        return result.stdout


class SudoPmsetWriter:
    """Low power mode writes via ``sudo pmset -b|-c lowpowermode 0|1``.

    sudo may put up an authorization prompt (password or Touch ID). Any
    refusal, including the prompt outliving the timeout, is reported as
    an authorization denial.
    """

    def __init__(
        self,
        pmset_path: str = DEFAULT_PMSET,
        sudo_path: str = "sudo",
        timeout: float = 60.0,
    ) -> None:
        self.pmset_path = pmset_path
        self.sudo_path = sudo_path
        self.timeout = timeout

    def command_for(self, context: PowerContext, enabled: bool) -> list[str]:
        """Return the command line that sets one context's flag."""
        return [
            self.sudo_path,
            self.pmset_path,
            context.pmset_flag,
            "lowpowermode",
            "1" if enabled else "0",
        ]

    def set_low_power(self, context: PowerContext, enabled: bool) -> None:
        cmd = self.command_for(context, enabled)
        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as exc:
            logger.warning("Low power mode write refused (%s): %s", context.value, exc)
            raise PolicyError(
                PolicyFailure.AUTHORIZATION_DENIED, context=context, original_error=exc
            ) from exc

        logger.info("Low power mode %s for %s context", "on" if enabled else "off", context.value)
