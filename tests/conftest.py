import pytest

from batterystatus.controller import PowerStatusService
from batterystatus.system.protocols import (
    MockPowerQueries,
    MockPrivilegedWriter,
    render_custom_settings,
)
from samples import ADAPTER_NONE, BATTERY_DISCHARGING


@pytest.fixture
def queries() -> MockPowerQueries:
    return MockPowerQueries(
        battery=BATTERY_DISCHARGING,
        adapter=ADAPTER_NONE,
        low_power=render_custom_settings(False, False),
    )


@pytest.fixture
def writer(queries: MockPowerQueries) -> MockPrivilegedWriter:
    return MockPrivilegedWriter(queries=queries)


@pytest.fixture
def service(queries: MockPowerQueries, writer: MockPrivilegedWriter) -> PowerStatusService:
    return PowerStatusService(queries=queries, writer=writer)
