from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from batterystatus.policy.errors import PolicyError
    from batterystatus.scheduling.models import RefreshSnapshot


@runtime_checkable
class StatusDisplay(Protocol):
    """Protocol for the surface that presents status and policy.

    The refresh loop pushes every state change here; how it is rendered
    (menu, list, terminal) is up to the implementation.
    """

    def publish(self, snapshot: RefreshSnapshot) -> None:
        """Present the latest snapshot.

        Args:
            snapshot: Status, policy, loading flag and error
        """
        ...

    def notify(self, message: str) -> None:
        """Show a short confirmation message."""
        ...

    def request_manual_settings(self, error: PolicyError) -> None:
        """Direct the user to change low power mode by hand.

        Args:
            error: The refused change
        """
        ...


class MockStatusDisplay:
    """Mock implementation of StatusDisplay for testing."""

    def __init__(self):
        self.snapshots: list[RefreshSnapshot] = []
        self.messages: list[str] = []
        self.redirects: list[PolicyError] = []

    def publish(self, snapshot: RefreshSnapshot) -> None:
        """Record the snapshot."""
        self.snapshots.append(snapshot)

    def notify(self, message: str) -> None:
        """Record the message."""
        self.messages.append(message)

    def request_manual_settings(self, error: PolicyError) -> None:
        """Record the redirect request."""
        self.redirects.append(error)

    @property
    def last(self) -> RefreshSnapshot | None:
        """Most recently published snapshot."""
        return self.snapshots[-1] if self.snapshots else None

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.snapshots = []
        self.messages = []
        self.redirects = []
