"""Tests for reading and changing the low power mode policy."""

from __future__ import annotations

import pytest

from batterystatus.common.enums import LowPowerMode, PowerContext
from batterystatus.policy.controller import PolicyController, parse_policy_flags
from batterystatus.policy.errors import PolicyError, PolicyFailure
from batterystatus.status.errors import QueryError
from batterystatus.system.protocols import (
    MockPowerQueries,
    MockPrivilegedWriter,
    render_custom_settings,
)

UNSECTIONED = """\
 lowpowermode         1
 standby              1
 lowpowermode         0
"""

AC_FIRST = """\
AC Power:
 lowpowermode         0
 sleep                1
Battery Power:
 lowpowermode         1
 sleep                1
"""


# ── parsing ─────────────────────────────────────────────────────────────────
def test_positional_flags() -> None:
    policy = parse_policy_flags(UNSECTIONED)
    assert policy.battery_flag is True
    assert policy.ac_flag is False
    assert policy.mode is LowPowerMode.ONLY_ON_BATTERY


def test_sections_override_line_order() -> None:
    policy = parse_policy_flags(AC_FIRST)
    assert policy.battery_flag is True
    assert policy.ac_flag is False


def test_single_flag_defaults_second_to_false() -> None:
    policy = parse_policy_flags(" lowpowermode         1\n")
    assert policy.battery_flag is True
    assert policy.ac_flag is False


def test_no_flags_reads_as_never() -> None:
    assert parse_policy_flags("Battery Power:\n sleep 1\n").mode is LowPowerMode.NEVER
    assert parse_policy_flags("").mode is LowPowerMode.NEVER


def test_section_missing_flag_defaults_false() -> None:
    text = "Battery Power:\n sleep 1\nAC Power:\n lowpowermode 1\n"
    policy = parse_policy_flags(text)
    assert policy.battery_flag is False
    assert policy.ac_flag is True


def test_ac_only_section_sets_ac_flag() -> None:
    policy = parse_policy_flags("AC Power:\n lowpowermode 1\n sleep 1\n")
    assert policy.battery_flag is False
    assert policy.ac_flag is True
    assert policy.mode is LowPowerMode.ONLY_ON_POWER_ADAPTER


def test_battery_only_section_sets_battery_flag() -> None:
    policy = parse_policy_flags("Battery Power:\n lowpowermode 1\n sleep 1\n")
    assert policy.battery_flag is True
    assert policy.ac_flag is False


def test_current_policy_tolerates_partial_data() -> None:
    queries = MockPowerQueries(low_power=" lowpowermode 1\n")
    controller = PolicyController(queries, MockPrivilegedWriter())
    policy = controller.current_policy()
    assert policy.mode is LowPowerMode.ONLY_ON_BATTERY
    assert controller.last_known == policy


def test_current_policy_propagates_query_error() -> None:
    queries = MockPowerQueries(fail_on=["low_power_snapshot"])
    with pytest.raises(QueryError):
        PolicyController(queries, MockPrivilegedWriter()).current_policy()


# ── changing the mode ───────────────────────────────────────────────────────
@pytest.mark.parametrize("mode", list(LowPowerMode))
def test_set_mode_writes_both_contexts_in_order(mode: LowPowerMode) -> None:
    queries = MockPowerQueries(low_power=render_custom_settings(False, False))
    writer = MockPrivilegedWriter(queries=queries)
    controller = PolicyController(queries, writer)

    policy = controller.set_mode(mode)

    assert policy.mode is mode
    assert [context for context, _ in writer.write_calls] == [
        PowerContext.BATTERY,
        PowerContext.AC,
    ]


def test_ac_denial_reports_partial_change() -> None:
    queries = MockPowerQueries(low_power=render_custom_settings(False, False))
    writer = MockPrivilegedWriter(deny=[PowerContext.AC], queries=queries)
    controller = PolicyController(queries, writer)
    controller.current_policy()

    with pytest.raises(PolicyError) as excinfo:
        controller.set_mode(LowPowerMode.ALWAYS)

    err = excinfo.value
    assert err.reason is PolicyFailure.AUTHORIZATION_DENIED
    assert err.requires_manual_settings is True
    assert err.context is PowerContext.AC
    assert err.policy is not None
    assert err.policy.battery_flag is True
    assert err.policy.ac_flag is False
    assert err.policy.mode is LowPowerMode.ONLY_ON_BATTERY


def test_ac_denial_keeps_previous_ac_flag() -> None:
    queries = MockPowerQueries(low_power=render_custom_settings(False, True))
    writer = MockPrivilegedWriter(deny=[PowerContext.AC], queries=queries)
    controller = PolicyController(queries, writer)

    with pytest.raises(PolicyError) as excinfo:
        controller.set_mode(LowPowerMode.ONLY_ON_BATTERY)

    assert excinfo.value.policy is not None
    assert excinfo.value.policy.battery_flag is True
    assert excinfo.value.policy.ac_flag is True


def test_battery_denial_skips_ac_write() -> None:
    queries = MockPowerQueries(low_power=render_custom_settings(False, False))
    writer = MockPrivilegedWriter(deny=[PowerContext.BATTERY], queries=queries)
    controller = PolicyController(queries, writer)

    with pytest.raises(PolicyError) as excinfo:
        controller.set_mode(LowPowerMode.ALWAYS)

    assert writer.write_calls == [(PowerContext.BATTERY, True)]
    assert excinfo.value.context is PowerContext.BATTERY
    assert excinfo.value.policy is not None
    assert excinfo.value.policy.mode is LowPowerMode.NEVER


class _FlakyQueries(MockPowerQueries):
    """Low power query that fails after the first read."""

    def __init__(self, low_power: str) -> None:
        super().__init__(low_power=low_power)
        self.reads = 0

    def low_power_snapshot(self) -> str:
        self.reads += 1
        if self.reads > 1:
            raise QueryError("pmset went away")
        return self.low_power


def test_denial_with_failed_reread_uses_best_known() -> None:
    queries = _FlakyQueries(render_custom_settings(False, True))
    writer = MockPrivilegedWriter(deny=[PowerContext.AC])
    controller = PolicyController(queries, writer)
    controller.current_policy()

    with pytest.raises(PolicyError) as excinfo:
        controller.set_mode(LowPowerMode.NEVER)

    # Battery write went through, AC flag is whatever was last read
    assert excinfo.value.policy is not None
    assert excinfo.value.policy.battery_flag is False
    assert excinfo.value.policy.ac_flag is True


def test_successful_change_with_failed_reread_returns_written_flags() -> None:
    queries = _FlakyQueries(render_custom_settings(False, False))
    controller = PolicyController(queries, MockPrivilegedWriter())
    controller.current_policy()

    policy = controller.set_mode(LowPowerMode.ONLY_ON_POWER_ADAPTER)

    assert policy.mode is LowPowerMode.ONLY_ON_POWER_ADAPTER
    assert controller.last_known == policy
