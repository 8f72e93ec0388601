"""Reading and changing the low power mode policy."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from batterystatus.common.enums import LowPowerMode, PowerContext
from batterystatus.policy.errors import PolicyError
from batterystatus.policy.models import LowPowerPolicy, flags_of
from batterystatus.status.errors import QueryError

if TYPE_CHECKING:
    from batterystatus.system.protocols import PowerQueries, PrivilegedWriter

logger: Final = logging.getLogger(__name__)

FLAG_RE: Final = re.compile(r"\blowpowermode\s+([01])\b")


def _section(text: str, context: PowerContext) -> str | None:
    """Return the text of one ``pmset -g custom`` section, if headed."""
    start = text.find(context.section_header)
    if start < 0:
        return None
    body_start = start + len(context.section_header)
    other = PowerContext.AC if context is PowerContext.BATTERY else PowerContext.BATTERY
    end = text.find(other.section_header, body_start)
    return text[body_start:] if end < 0 else text[body_start:end]


def _section_flag(section: str | None) -> bool:
    if section is None:
        return False
    match = FLAG_RE.search(section)
    return match is not None and match.group(1) == "1"


def parse_policy_flags(text: str) -> LowPowerPolicy:
    """Extract the battery and AC low power flags from ``pmset -g custom``.

    Sectioned output (``Battery Power:`` / ``AC Power:``) is read per
    section, even when only one of the sections is reported (desktop Macs
    list AC only). Without any header the first flag belongs to the battery
    and the second to AC. Missing flags read as False.
    """
    battery_section = _section(text, PowerContext.BATTERY)
    ac_section = _section(text, PowerContext.AC)

    if battery_section is not None or ac_section is not None:
        return LowPowerPolicy(
            battery_flag=_section_flag(battery_section),
            ac_flag=_section_flag(ac_section),
        )

    values = [m.group(1) == "1" for m in FLAG_RE.finditer(text)][:2]
    if len(values) < 2:
        logger.debug("Only %d low power flag(s) reported; defaulting the rest to off", len(values))
    values += [False] * (2 - len(values))
    return LowPowerPolicy(battery_flag=values[0], ac_flag=values[1])


class PolicyController:
    """Owns the low power mode policy.

    Reads go through the low power query; changes go through two
    independent privileged writes, one per power context. The controller
    never assumes a write took effect: after any change it re-reads the
    flags and reports what the system says.
    """

    def __init__(self, queries: PowerQueries, writer: PrivilegedWriter) -> None:
        """Initialize with the query and write interfaces.

        Args:
            queries: Source of the low power flags report
            writer: Privileged low power mode writer
        """
        self.queries = queries
        self.writer = writer
        self._last_known: LowPowerPolicy | None = None

    @property
    def last_known(self) -> LowPowerPolicy | None:
        """Most recently read policy, if any."""
        return self._last_known

    def current_policy(self) -> LowPowerPolicy:
        """Read the current policy from the system.

        Raises:
            QueryError: If the low power query fails
        """
        policy = parse_policy_flags(self.queries.low_power_snapshot())
        self._last_known = policy
        return policy

    def set_mode(self, target: LowPowerMode) -> LowPowerPolicy:
        """Apply *target* by writing the battery flag, then the AC flag.

        Args:
            target: Desired low power mode

        Returns:
            The policy read back after both writes

        Raises:
            PolicyError: If a write was refused. ``policy`` on the error
                holds the best-known policy after the partial change.
        """
        battery_flag, ac_flag = flags_of(target)
        known = self._last_known or LowPowerPolicy()
        logger.info("Setting low power mode to %s", target.label)

        for context, enabled in ((PowerContext.BATTERY, battery_flag), (PowerContext.AC, ac_flag)):
            try:
                self.writer.set_low_power(context, enabled)
            except PolicyError as exc:
                policy = self._confirm(known)
                logger.warning(
                    "Low power mode change to %s stopped at %s context; now %s",
                    target.label,
                    context.value,
                    policy.mode.label,
                )
                raise PolicyError(
                    exc.reason,
                    context=context,
                    policy=policy,
                    original_error=exc.original_error or exc,
                ) from exc
            known = known.with_flag(context, enabled)

        return self._confirm(known)

    def _confirm(self, fallback: LowPowerPolicy) -> LowPowerPolicy:
        """Re-read the policy, falling back to *fallback* if the read fails."""
        try:
            return self.current_policy()
        except QueryError as exc:
            logger.warning("Could not re-read low power mode: %s", exc)
            self._last_known = fallback
            return fallback
