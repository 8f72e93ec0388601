"""Exception classes for low power mode changes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from batterystatus.status.errors import BatteryStatusError

if TYPE_CHECKING:
    from batterystatus.common.enums import PowerContext
    from batterystatus.policy.models import LowPowerPolicy


class PolicyFailure(Enum):
    """Reasons a low power mode change can be refused."""

    AUTHORIZATION_DENIED = "authorization_denied"


class PolicyError(BatteryStatusError):
    """Raised when a privileged low power mode write is rejected.

    Carries the controller's best-known policy after the failed change so
    callers can show the truth rather than the requested mode.
    """

    def __init__(
        self,
        reason: PolicyFailure,
        context: PowerContext | None = None,
        policy: LowPowerPolicy | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize with the rejected write.

        Args:
            reason: Why the change failed
            context: Power context whose write was rejected
            policy: Best-known policy after the failure
            original_error: The original exception that was caught
        """
        where = f" ({context.value} context)" if context is not None else ""
        super().__init__(f"Low power mode change was not authorized{where}")
        self.reason = reason
        self.context = context
        self.policy = policy
        self.original_error = original_error

    @property
    def requires_manual_settings(self) -> bool:
        """Return True if the user should be sent to the system settings."""
        return self.reason is PolicyFailure.AUTHORIZATION_DENIED
