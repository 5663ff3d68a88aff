"""Observer hub for coordinator state changes.

Three channels:

* field changes -- ``callback(FieldChange)``
* per-action availability -- ``callback(ActionKind, bool)``
* consolidated snapshots -- ``callback(CoordinatorSnapshot)``

Delivery is synchronous and in subscription order. A subscriber that raises
is logged and skipped; it never interrupts delivery to the others or the
coordinator mutation that triggered it.
"""

from __future__ import annotations

from collections.abc import Callable

from routerscope.models.coordinator import (
    ActionKind,
    CoordinatorSnapshot,
    FieldChange,
)
from routerscope.utils.logging import get_logger

logger = get_logger(__name__)

FieldCallback = Callable[[FieldChange], None]
AvailabilityCallback = Callable[[ActionKind, bool], None]
SnapshotCallback = Callable[[CoordinatorSnapshot], None]


class ChangeNotifier:
    """Subscription registry and fan-out for coordinator events."""

    def __init__(self) -> None:
        self._field_subscribers: list[FieldCallback] = []
        self._availability_subscribers: dict[ActionKind, list[AvailabilityCallback]] = {
            action: [] for action in ActionKind
        }
        self._snapshot_subscribers: list[SnapshotCallback] = []

    # -- subscription -------------------------------------------------------

    def subscribe(self, callback: FieldCallback) -> Callable[[], None]:
        """Receive every field change. Returns an unsubscribe callable."""
        self._field_subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: FieldCallback) -> None:
        if callback in self._field_subscribers:
            self._field_subscribers.remove(callback)

    def subscribe_availability(
        self, action: ActionKind, callback: AvailabilityCallback,
    ) -> Callable[[], None]:
        """Receive availability announcements for one action."""
        self._availability_subscribers[action].append(callback)
        return lambda: self.unsubscribe_availability(action, callback)

    def unsubscribe_availability(
        self, action: ActionKind, callback: AvailabilityCallback,
    ) -> None:
        subscribers = self._availability_subscribers[action]
        if callback in subscribers:
            subscribers.remove(callback)

    def subscribe_snapshot(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Receive a consolidated snapshot after every mutation."""
        self._snapshot_subscribers.append(callback)
        return lambda: self.unsubscribe_snapshot(callback)

    def unsubscribe_snapshot(self, callback: SnapshotCallback) -> None:
        if callback in self._snapshot_subscribers:
            self._snapshot_subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return (
            len(self._field_subscribers)
            + sum(len(subs) for subs in self._availability_subscribers.values())
            + len(self._snapshot_subscribers)
        )

    # -- delivery -----------------------------------------------------------

    def publish_field(self, change: FieldChange) -> None:
        for callback in list(self._field_subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception("field_subscriber_error", field=change.field.value)

    def publish_availability(self, action: ActionKind, available: bool) -> None:
        for callback in list(self._availability_subscribers[action]):
            try:
                callback(action, available)
            except Exception:
                logger.exception("availability_subscriber_error", action=action.value)

    def publish_snapshot(self, snapshot: CoordinatorSnapshot) -> None:
        for callback in list(self._snapshot_subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("snapshot_subscriber_error")
