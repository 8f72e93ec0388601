"""Core service for battery status and low power mode control."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Final

from batterystatus.common.enums import LowPowerMode, PowerContext
from batterystatus.policy.controller import PolicyController
from batterystatus.policy.models import LowPowerPolicy
from batterystatus.settings.user import UserSettings
from batterystatus.status.errors import FetchError, ParseError, QueryError
from batterystatus.status.models import PowerStatus
from batterystatus.status.parser import parse_power_status
from batterystatus.system.pmset import PmsetQueries, SudoPmsetWriter
from batterystatus.system.protocols import (
    MockPowerQueries,
    MockPrivilegedWriter,
    PowerQueries,
    PrivilegedWriter,
)

TEST_BATTERY_REPORT = """\
Now drawing from 'AC Power'
 -InternalBattery-0 (id=4653155)	100%; charged; 0:00 remaining present: true
"""
TEST_ADAPTER_REPORT = """\
Wattage = 61.0
Current = 3050mA
Voltage = 20000mV
"""

logger: Final = logging.getLogger(__name__)


class PowerStatusService:
    """Runs fetch cycles and low power mode changes.

    This class ties the pieces together:
    - Issuing the battery, AC adapter and low power queries
    - Parsing the two status reports into a PowerStatus
    - Reading the policy through the PolicyController
    - Forwarding mode changes to the PolicyController

    It holds no status of its own; the refresh loop owns the current
    snapshot.
    """

    def __init__(
        self,
        settings: UserSettings | None = None,
        queries: PowerQueries | None = None,
        writer: PrivilegedWriter | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            settings: User settings (defaults when omitted)
            queries: Optional custom query implementation
            writer: Optional custom privileged writer
        """
        self.settings = settings or UserSettings()

        # Allow dependency injection or create defaults
        self.queries = queries or PmsetQueries(
            self.settings.pmset_path, timeout=self.settings.query_timeout_seconds
        )
        self.writer = writer or SudoPmsetWriter(
            self.settings.pmset_path,
            self.settings.sudo_path,
            timeout=self.settings.write_timeout_seconds,
        )
        self.policy_controller = PolicyController(self.queries, self.writer)

    def fetch(self) -> tuple[PowerStatus, LowPowerPolicy]:
        """Run one fetch cycle.

        Queries are submitted in the order battery, AC adapter, low power.
        They run concurrently unless ``parallel_queries`` is off.

        Returns:
            Tuple of (status, policy)

        Raises:
            FetchError: If any query fails or the battery report is unusable
        """
        try:
            if self.settings.parallel_queries:
                with ThreadPoolExecutor(max_workers=3, thread_name_prefix="pmset") as pool:
                    battery = pool.submit(self.queries.battery_snapshot)
                    adapter = pool.submit(self.queries.adapter_snapshot)
                    policy = pool.submit(self.policy_controller.current_policy)
                    battery_text, adapter_text = battery.result(), adapter.result()
                    current = policy.result()
            else:
                battery_text = self.queries.battery_snapshot()
                adapter_text = self.queries.adapter_snapshot()
                current = self.policy_controller.current_policy()

            status = parse_power_status(battery_text, adapter_text)
        except (ParseError, QueryError) as exc:
            logger.warning("Fetch failed: %s", exc)
            raise FetchError("Failed to fetch battery information", original_error=exc) from exc

        return status, current

    def set_low_power_mode(self, mode: LowPowerMode) -> LowPowerPolicy:
        """Change the low power mode.

        Raises:
            PolicyError: If authorization was refused
        """
        return self.policy_controller.set_mode(mode)

    @classmethod
    def create_for_testing(
        cls,
        battery: str = TEST_BATTERY_REPORT,
        adapter: str = TEST_ADAPTER_REPORT,
        low_power: str = "",
        deny: list[PowerContext] | None = None,
        settings: UserSettings | None = None,
    ) -> PowerStatusService:
        """Create a service backed by in-memory mocks.

        Args:
            battery: Battery report the mock returns
            adapter: AC adapter report the mock returns
            low_power: Low power report the mock returns
            deny: Power contexts whose writes are refused
            settings: Optional settings

        Returns:
            PowerStatusService wired to MockPowerQueries/MockPrivilegedWriter
        """
        queries = MockPowerQueries(battery=battery, adapter=adapter, low_power=low_power)
        writer = MockPrivilegedWriter(deny=deny, queries=queries)
        return cls(settings=settings, queries=queries, writer=writer)
