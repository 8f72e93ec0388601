from __future__ import annotations

from typing import Protocol, runtime_checkable

from batterystatus.common.enums import PowerContext
from batterystatus.policy.controller import parse_policy_flags
from batterystatus.policy.errors import PolicyError, PolicyFailure
from batterystatus.status.errors import QueryError


@runtime_checkable
class PowerQueries(Protocol):
    """Protocol for the three read-only power-management queries.

    Each query returns free-form text or raises QueryError. Implementations
    must be safe to call from several threads at once.
    """

    def battery_snapshot(self) -> str:
        """Return the battery report (charge, state, time remaining)."""
        ...

    def adapter_snapshot(self) -> str:
        """Return the AC adapter report (wattage, current, voltage)."""
        ...

    def low_power_snapshot(self) -> str:
        """Return the per-context power settings, including low power mode."""
        ...


@runtime_checkable
class PrivilegedWriter(Protocol):
    """Protocol for the elevated low power mode writes."""

    def set_low_power(self, context: PowerContext, enabled: bool) -> None:
        """Enable or disable low power mode for one power context.

        Args:
            context: Power context to change
            enabled: Desired flag value

        Raises:
            PolicyError: If authorization was refused
        """
        ...


class MockPowerQueries:
    """Mock implementation of PowerQueries for testing."""

    def __init__(
        self,
        battery: str = "",
        adapter: str = "",
        low_power: str = "",
        fail_on: list[str] | None = None,
    ):
        self.battery = battery
        self.adapter = adapter
        self.low_power = low_power
        self.fail_on = fail_on or []
        self.calls: list[str] = []

    def _answer(self, name: str, text: str) -> str:
        self.calls.append(name)
        if name in self.fail_on:
            raise QueryError(f"Simulated {name} failure", command=[name], returncode=1)
        return text

    def battery_snapshot(self) -> str:
        return self._answer("battery_snapshot", self.battery)

    def adapter_snapshot(self) -> str:
        return self._answer("adapter_snapshot", self.adapter)

    def low_power_snapshot(self) -> str:
        return self._answer("low_power_snapshot", self.low_power)

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.calls = []


class MockPrivilegedWriter:
    """Writer that records calls and can refuse chosen contexts.

    When *queries* is given, successful writes are reflected in its
    ``low_power`` text so a re-read sees the new flags.
    """

    def __init__(
        self,
        deny: list[PowerContext] | None = None,
        queries: MockPowerQueries | None = None,
    ):
        self.deny = deny or []
        self.queries = queries
        self.write_calls: list[tuple[PowerContext, bool]] = []

    def set_low_power(self, context: PowerContext, enabled: bool) -> None:
        self.write_calls.append((context, enabled))
        if context in self.deny:
            raise PolicyError(PolicyFailure.AUTHORIZATION_DENIED, context=context)
        if self.queries is not None:
            policy = parse_policy_flags(self.queries.low_power).with_flag(context, enabled)
            self.queries.low_power = render_custom_settings(policy.battery_flag, policy.ac_flag)

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.write_calls = []


def render_custom_settings(battery_flag: bool, ac_flag: bool) -> str:
    """Render ``pmset -g custom`` style text for the given flags."""
    return (
        "Battery Power:\n"
        f" lowpowermode         {int(battery_flag)}\n"
        " displaysleep         2\n"
        "AC Power:\n"
        f" lowpowermode         {int(ac_flag)}\n"
        " displaysleep         10\n"
    )
