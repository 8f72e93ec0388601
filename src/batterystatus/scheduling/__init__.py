"""Refresh loop for battery status and low power mode."""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import TYPE_CHECKING, Final

from batterystatus.common.enums import LowPowerMode, RefreshState
from batterystatus.policy.errors import PolicyError
from batterystatus.policy.models import LowPowerPolicy
from batterystatus.scheduling.models import RefreshSnapshot
from batterystatus.status.errors import FetchError

if TYPE_CHECKING:
    from batterystatus.controller import PowerStatusService
    from batterystatus.display.protocols import StatusDisplay

logger: Final = logging.getLogger(__name__)

DEFAULT_INTERVAL: Final = 30.0


class RefreshLoop:
    """Owns the current status snapshot and keeps it fresh.

    Controls when the application should:
    - Fetch status and policy (on a timer or on demand)
    - Publish each state change to the display
    - Apply low power mode changes and report refusals

    Only one fetch or mode change runs at a time. A trigger that arrives
    while either is in flight is dropped. After ``stop()`` the periodic
    trigger is gone and any fetch still running has its result discarded.
    """

    def __init__(
        self,
        service: PowerStatusService,
        display: StatusDisplay,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.service = service
        self.display = display
        self.interval = interval

        self._busy = threading.Lock()
        self._snapshot_lock = threading.Lock()
        self._publish_lock = threading.Lock()
        self._snapshot = RefreshSnapshot()
        self._stop_event = threading.Event()
        self._timer: threading.Thread | None = None
        self._closed = False

    # ── state ────────────────────────────────────────────────────────────────
    @property
    def snapshot(self) -> RefreshSnapshot:
        """Latest snapshot."""
        with self._snapshot_lock:
            return self._snapshot

    @property
    def state(self) -> RefreshState:
        return self.snapshot.state

    @property
    def is_busy(self) -> bool:
        """Return True while a fetch or low power mode change is in flight."""
        return self._busy.locked()

    @property
    def is_scheduled(self) -> bool:
        """Return True while the periodic trigger is alive."""
        return self._timer is not None and self._timer.is_alive()

    def _publish(self, **changes: object) -> bool:
        """Apply *changes* to the snapshot and hand it to the display.

        Snapshots reach the display in the order they were taken. Returns
        False, without touching anything, once the loop is closed.
        """
        with self._publish_lock:
            with self._snapshot_lock:
                if self._closed:
                    return False
                self._snapshot = self._snapshot.evolve(**changes)
                snapshot = self._snapshot
            self.display.publish(snapshot)
        return True

    # ── fetch ────────────────────────────────────────────────────────────────
    def start(self) -> bool:
        """Run one fetch cycle unless one is already in flight.

        Returns:
            True if a fetch ran, False if the trigger was dropped
        """
        if self._closed:
            logger.debug("Refresh loop stopped; ignoring trigger")
            return False
        if not self._busy.acquire(blocking=False):
            logger.debug("Fetch already in flight; dropping trigger")
            return False

        try:
            self._publish(state=RefreshState.LOADING)
            try:
                status, policy = self.service.fetch()
            except FetchError as err:
                if not self._publish(state=RefreshState.FAILED, error=err):
                    logger.debug("Discarding failed fetch after stop")
            else:
                if not self._publish(
                    state=RefreshState.READY, status=status, policy=policy, error=None
                ):
                    logger.debug("Discarding fetch result after stop")
        finally:
            self._busy.release()
        return True

    # ── periodic trigger ─────────────────────────────────────────────────────
    def schedule(self) -> None:
        """Fetch now and then every ``interval`` seconds until ``stop()``."""
        if self._closed:
            raise RuntimeError("Refresh loop has been stopped")
        if self.is_scheduled:
            return

        self._stop_event.clear()
        self._timer = threading.Thread(
            target=self._run_periodic, name="battery-refresh", daemon=True
        )
        self._timer.start()
        logger.info("Refreshing battery status every %gs", self.interval)

    def _run_periodic(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.start()
            except Exception:
                logger.exception("Unexpected error during refresh; will retry next tick")
            if self._stop_event.wait(self.interval):
                break

    def stop(self, timeout: float | None = None) -> None:
        """Tear down: release the periodic trigger and discard late results.

        Args:
            timeout: Seconds to wait for the timer thread to exit (None
                waits for any in-flight fetch to return)
        """
        with self._snapshot_lock:
            self._closed = True
        self._stop_event.set()

        timer, self._timer = self._timer, None
        if timer is not None and timer is not threading.current_thread():
            timer.join(timeout)
        logger.info("Battery status refresh stopped")

    def __enter__(self) -> RefreshLoop:
        self.schedule()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    # ── policy control ───────────────────────────────────────────────────────
    def set_low_power_mode(self, mode: LowPowerMode) -> LowPowerPolicy | None:
        """Change the low power mode and publish the confirmed policy.

        On refusal the display is asked to send the user to the system
        settings, and the best-known policy is published instead. The change
        waits for an in-flight fetch and holds off the periodic trigger
        until it is confirmed. Once the loop is stopped nothing more is
        sent to the display.

        Returns:
            The policy after the change, or the best-known policy after a
            refusal (None if nothing is known)

        Raises:
            RuntimeError: If the loop has already been stopped
        """
        if self._closed:
            raise RuntimeError("Refresh loop has been stopped")

        with self._busy:
            try:
                policy = self.service.set_low_power_mode(mode)
            except PolicyError as err:
                if err.policy is not None:
                    self._publish(policy=err.policy)
                if err.requires_manual_settings and not self._closed:
                    self.display.request_manual_settings(err)
                return err.policy

            if self._publish(policy=policy):
                self.display.notify(f"Low Power Mode set to {mode.label}")
            else:
                logger.debug("Refresh loop stopped; not announcing low power mode change")
            return policy
