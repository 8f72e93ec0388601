"""Data models for the refresh loop."""

from __future__ import annotations

from dataclasses import dataclass, replace

from batterystatus.common.enums import RefreshState
from batterystatus.policy.models import LowPowerPolicy
from batterystatus.status.errors import FetchError
from batterystatus.status.models import PowerStatus


@dataclass(frozen=True)
class RefreshSnapshot:
    """What the display collaborator receives after every transition.

    ``status`` and ``policy`` keep the last good values while a new fetch
    is loading or after one failed.
    """

    state: RefreshState = RefreshState.IDLE
    status: PowerStatus | None = None
    policy: LowPowerPolicy | None = None
    error: FetchError | None = None

    @property
    def is_loading(self) -> bool:
        """Return True while a fetch is in flight."""
        return self.state is RefreshState.LOADING

    def evolve(self, **changes: object) -> RefreshSnapshot:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)  # type: ignore[arg-type]
