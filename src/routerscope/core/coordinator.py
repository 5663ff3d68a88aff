"""Connection lifecycle coordinator.

Holds the registry of router targets and the single selected target, and
drives connect/disconnect/refresh against a :class:`DeviceApiClient`. At most
one connect or refresh is in flight at a time; that guard is the ``busy``
flag, which is checked and set in one synchronous step so overlapping
coroutines on the same event loop cannot both start.

Every mutation of the selection, the busy flag or the status message is
published through a :class:`ChangeNotifier`. A change to the selection or the
busy flag is followed by an announcement of all four action availabilities,
and every mutation ends with one consolidated snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from routerscope.config import CoordinatorSettings
from routerscope.core.fetch import run_fetch_sequence
from routerscope.core.notifier import ChangeNotifier
from routerscope.exceptions import InvalidArgumentError, TargetNotFoundError
from routerscope.models.coordinator import (
    AVAILABILITY_INPUTS,
    ActionKind,
    ActionOutcome,
    ActionResult,
    CoordinatorSnapshot,
    FetchReport,
    FieldChange,
    StateField,
)
from routerscope.models.target import Target, new_target_id
from routerscope.services.base import DeviceApiClient, PollingClient, StatisticsService
from routerscope.utils.logging import get_logger

logger = get_logger(__name__)

MSG_READY = "Ready"
MSG_ADDED = "Added new router"
MSG_REMOVED = "Removed router"
MSG_CONNECTING = "Connecting..."
MSG_CONNECTED = "Connected"
MSG_CONNECT_FAILED = "Failed to connect: "
MSG_CONNECT_ERROR = "Connection error: "
MSG_DISCONNECTED = "Disconnected"
MSG_DISCONNECT_ERROR = "Disconnect error: "
MSG_REFRESHING = "Refreshing..."
MSG_REFRESHED = "Refreshed"
MSG_REFRESH_ERROR = "Refresh error: "
MSG_TARGET_REMOVED = "target removed"


class ConnectionLifecycleCoordinator:
    """Registry, selection and gated connection actions for router targets."""

    def __init__(
        self,
        device_api: DeviceApiClient,
        polling_client: PollingClient,
        statistics: StatisticsService,
        targets: Iterable[Target] | None = None,
        settings: CoordinatorSettings | None = None,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        if device_api is None:
            raise InvalidArgumentError("device_api is required")
        if polling_client is None:
            raise InvalidArgumentError("polling_client is required")
        if statistics is None:
            raise InvalidArgumentError("statistics is required")
        if targets is None:
            raise InvalidArgumentError("targets is required (pass an empty list for none)")

        self._device_api = device_api
        self._polling_client = polling_client
        self._statistics = statistics
        self._settings = settings or CoordinatorSettings()
        self._notifier = notifier or ChangeNotifier()

        self._targets: list[Target] = []
        for target in targets:
            if target in self._targets:
                raise InvalidArgumentError(f"Duplicate target id: {target.id}")
            self._targets.append(target)

        self._selected: Target | None = self._targets[0] if self._targets else None
        self._busy = False
        self._status_message = MSG_READY

        # Subscribers on an injected notifier see the initial state
        if self._selected is not None:
            self._notifier.publish_field(FieldChange(StateField.SELECTED_TARGET, self._selected))
        self._notifier.publish_field(FieldChange(StateField.STATUS_MESSAGE, self._status_message))
        self._announce_availability()
        self._notifier.publish_snapshot(self.snapshot())
        logger.info(
            "coordinator_ready",
            target_count=len(self._targets),
            fetch_policy=self._settings.fetch_policy.value,
        )

    # -- read accessors -----------------------------------------------------

    @property
    def targets(self) -> tuple[Target, ...]:
        return tuple(self._targets)

    @property
    def selected_target(self) -> Target | None:
        return self._selected

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def settings(self) -> CoordinatorSettings:
        return self._settings

    @property
    def device_api(self) -> DeviceApiClient:
        return self._device_api

    @property
    def polling_client(self) -> PollingClient:
        return self._polling_client

    @property
    def statistics(self) -> StatisticsService:
        return self._statistics

    def get_target(self, target_id: str) -> Target:
        """Look up a registered target by id.

        Raises:
            TargetNotFoundError: If no target has that id.
        """
        for target in self._targets:
            if target.id == target_id:
                return target
        raise TargetNotFoundError(f"Target not found: {target_id}")

    # -- availability -------------------------------------------------------

    def can_remove(self) -> bool:
        return self._selected is not None

    def can_connect(self) -> bool:
        return (
            self._selected is not None
            and not self._selected.is_connected
            and not self._busy
        )

    def can_disconnect(self) -> bool:
        return (
            self._selected is not None
            and self._selected.is_connected
            and not self._busy
        )

    def can_refresh(self) -> bool:
        return self.can_disconnect()

    def is_available(self, action: ActionKind) -> bool:
        if action == ActionKind.REMOVE:
            return self.can_remove()
        if action == ActionKind.CONNECT:
            return self.can_connect()
        if action == ActionKind.DISCONNECT:
            return self.can_disconnect()
        return self.can_refresh()

    def availability(self) -> dict[ActionKind, bool]:
        return {action: self.is_available(action) for action in ActionKind}

    def snapshot(self) -> CoordinatorSnapshot:
        return CoordinatorSnapshot(
            targets=[target.model_copy(deep=True) for target in self._targets],
            selected_id=self._selected.id if self._selected else None,
            busy=self._busy,
            status_message=self._status_message,
            availability=self.availability(),
        )

    # -- state mutation and fan-out -----------------------------------------

    def _set_field(self, field: StateField, value: Any) -> bool:
        attr = {
            StateField.SELECTED_TARGET: "_selected",
            StateField.BUSY: "_busy",
            StateField.STATUS_MESSAGE: "_status_message",
        }[field]
        # Targets compare by id
        if getattr(self, attr) == value:
            return False

        setattr(self, attr, value)
        self._notifier.publish_field(FieldChange(field, value))
        if field in AVAILABILITY_INPUTS:
            self._announce_availability()
        self._notifier.publish_snapshot(self.snapshot())
        return True

    def _announce_availability(self) -> None:
        for action in ActionKind:
            self._notifier.publish_availability(action, self.is_available(action))

    def _refresh_availability(self) -> None:
        """Re-announce availability after a selected target's own state changed."""
        self._announce_availability()
        self._notifier.publish_snapshot(self.snapshot())

    def _set_status(self, message: str) -> None:
        self._set_field(StateField.STATUS_MESSAGE, message)

    def _try_begin(self, action: ActionKind) -> Target | None:
        """Atomically check availability and raise the busy flag.

        No suspension point sits between the check and the set, so on a
        single event loop this is an atomic check-and-set.
        """
        if not self.is_available(action):
            return None
        target = self._selected
        self._set_field(StateField.BUSY, True)
        return target

    def _release_if_removed(self, target: Target) -> TargetNotFoundError | None:
        """Close the session of a target removed while an action was in flight.

        Returns the error to report, or None if *target* is still registered.
        """
        if target in self._targets:
            return None
        logger.warning("target_removed_in_flight", target_id=target.id)
        if target.is_connected:
            try:
                self._device_api.disconnect(target)
            except Exception as exc:
                logger.warning("target_disconnect_error", target_id=target.id, error=str(exc))
        return TargetNotFoundError(MSG_TARGET_REMOVED)

    def _removed_in_flight(
        self,
        action: ActionKind,
        prefix: str,
        error: TargetNotFoundError,
        report: FetchReport | None = None,
    ) -> ActionResult:
        message = prefix + str(error)
        self._set_status(message)
        return ActionResult(
            action=action,
            outcome=ActionOutcome.ERROR,
            message=message,
            error=error,
            fetch_report=report,
        )

    def _skipped(self, action: ActionKind) -> ActionResult:
        logger.debug("action_unavailable", action=action.value)
        return ActionResult(action=action, outcome=ActionOutcome.SKIPPED)

    # -- registry -----------------------------------------------------------

    def select(self, target_id: str | None) -> Target | None:
        """Select the target with *target_id*, or clear selection with None.

        Raises:
            TargetNotFoundError: If *target_id* is not registered.
        """
        target = None if target_id is None else self.get_target(target_id)
        self._set_field(StateField.SELECTED_TARGET, target)
        return target

    def add_target(self) -> Target:
        """Create a target from the configured defaults, register and select it."""
        defaults = self._settings.new_target
        target = Target(id=new_target_id(), **defaults.model_dump())
        self._targets.append(target)
        logger.info("target_added", target_id=target.id)
        self._set_field(StateField.SELECTED_TARGET, target)
        self._set_status(MSG_ADDED)
        return target

    def remove_selected(self) -> ActionResult:
        """Remove the selected target, disconnecting it first if connected."""
        if not self.can_remove():
            return self._skipped(ActionKind.REMOVE)

        target = self._selected
        if target.is_connected:
            try:
                self._device_api.disconnect(target)
            except Exception as exc:
                logger.warning("target_disconnect_error", target_id=target.id, error=str(exc))
                message = MSG_DISCONNECT_ERROR + str(exc)
                self._set_status(message)
                self._refresh_availability()
                return ActionResult(
                    action=ActionKind.REMOVE,
                    outcome=ActionOutcome.ERROR,
                    message=message,
                    error=exc,
                )

        self._targets.remove(target)
        logger.info("target_removed", target_id=target.id, remaining=len(self._targets))
        self._set_field(StateField.SELECTED_TARGET, self._targets[0] if self._targets else None)
        self._set_status(MSG_REMOVED)
        return ActionResult(
            action=ActionKind.REMOVE, outcome=ActionOutcome.SUCCEEDED, message=MSG_REMOVED,
        )

    # -- connection actions -------------------------------------------------

    async def connect(self) -> ActionResult:
        """Connect to the selected target and load its initial data."""
        target = self._try_begin(ActionKind.CONNECT)
        if target is None:
            return self._skipped(ActionKind.CONNECT)

        self._set_status(MSG_CONNECTING)
        logger.info("target_connecting", target_id=target.id, address=target.address)
        try:
            success = await self._device_api.connect(target)
            if not success:
                message = MSG_CONNECT_FAILED + target.status_text
                logger.warning("target_connect_failed", target_id=target.id, reason=target.status_text)
                self._set_status(message)
                return ActionResult(
                    action=ActionKind.CONNECT, outcome=ActionOutcome.FAILED, message=message,
                )

            removed = self._release_if_removed(target)
            if removed is not None:
                return self._removed_in_flight(ActionKind.CONNECT, MSG_CONNECT_ERROR, removed)

            self._set_status(MSG_CONNECTED)
            logger.info("target_connected", target_id=target.id)
            report = await run_fetch_sequence(
                self._device_api,
                target,
                log_entry_count=self._settings.log_entry_count,
                policy=self._settings.fetch_policy,
            )
            removed = self._release_if_removed(target)
            if removed is not None:
                return self._removed_in_flight(
                    ActionKind.CONNECT, MSG_CONNECT_ERROR, removed, report,
                )
            if not report.ok:
                message = MSG_CONNECT_ERROR + str(report.first_error)
                self._set_status(message)
                return ActionResult(
                    action=ActionKind.CONNECT,
                    outcome=ActionOutcome.ERROR,
                    message=message,
                    error=report.first_error,
                    fetch_report=report,
                )
            return ActionResult(
                action=ActionKind.CONNECT,
                outcome=ActionOutcome.SUCCEEDED,
                message=MSG_CONNECTED,
                fetch_report=report,
            )
        except Exception as exc:
            message = MSG_CONNECT_ERROR + str(exc)
            logger.warning("target_connect_error", target_id=target.id, error=str(exc))
            self._set_status(message)
            return ActionResult(
                action=ActionKind.CONNECT, outcome=ActionOutcome.ERROR, message=message, error=exc,
            )
        finally:
            self._set_field(StateField.BUSY, False)

    def disconnect(self) -> ActionResult:
        """Disconnect the selected target. Never suspends and never sets busy."""
        if not self.can_disconnect():
            return self._skipped(ActionKind.DISCONNECT)

        target = self._selected
        try:
            self._device_api.disconnect(target)
        except Exception as exc:
            message = MSG_DISCONNECT_ERROR + str(exc)
            logger.warning("target_disconnect_error", target_id=target.id, error=str(exc))
            self._set_status(message)
            self._refresh_availability()
            return ActionResult(
                action=ActionKind.DISCONNECT, outcome=ActionOutcome.ERROR, message=message, error=exc,
            )

        logger.info("target_disconnected", target_id=target.id)
        self._set_status(MSG_DISCONNECTED)
        self._refresh_availability()
        return ActionResult(
            action=ActionKind.DISCONNECT, outcome=ActionOutcome.SUCCEEDED, message=MSG_DISCONNECTED,
        )

    async def refresh(self) -> ActionResult:
        """Re-run the data fetches for the selected, connected target."""
        target = self._try_begin(ActionKind.REFRESH)
        if target is None:
            return self._skipped(ActionKind.REFRESH)

        self._set_status(MSG_REFRESHING)
        try:
            report = await run_fetch_sequence(
                self._device_api,
                target,
                log_entry_count=self._settings.log_entry_count,
                policy=self._settings.fetch_policy,
            )
            removed = self._release_if_removed(target)
            if removed is not None:
                return self._removed_in_flight(
                    ActionKind.REFRESH, MSG_REFRESH_ERROR, removed, report,
                )
            if not report.ok:
                message = MSG_REFRESH_ERROR + str(report.first_error)
                self._set_status(message)
                return ActionResult(
                    action=ActionKind.REFRESH,
                    outcome=ActionOutcome.ERROR,
                    message=message,
                    error=report.first_error,
                    fetch_report=report,
                )
            self._set_status(MSG_REFRESHED)
            logger.info("target_refreshed", target_id=target.id)
            return ActionResult(
                action=ActionKind.REFRESH,
                outcome=ActionOutcome.SUCCEEDED,
                message=MSG_REFRESHED,
                fetch_report=report,
            )
        except Exception as exc:
            message = MSG_REFRESH_ERROR + str(exc)
            logger.warning("target_refresh_error", target_id=target.id, error=str(exc))
            self._set_status(message)
            return ActionResult(
                action=ActionKind.REFRESH, outcome=ActionOutcome.ERROR, message=message, error=exc,
            )
        finally:
            self._set_field(StateField.BUSY, False)
