"""Unit tests for routerscope.core.notifier."""

from __future__ import annotations

from unittest.mock import MagicMock

from routerscope.core.notifier import ChangeNotifier
from routerscope.models.coordinator import (
    ActionKind,
    CoordinatorSnapshot,
    FieldChange,
    StateField,
)


class TestFieldChannel:
    def test_delivers_in_subscription_order(self):
        notifier = ChangeNotifier()
        seen: list[str] = []
        notifier.subscribe(lambda c: seen.append("first"))
        notifier.subscribe(lambda c: seen.append("second"))

        notifier.publish_field(FieldChange(StateField.BUSY, True))

        assert seen == ["first", "second"]

    def test_unsubscribe_handle(self):
        notifier = ChangeNotifier()
        callback = MagicMock()
        unsubscribe = notifier.subscribe(callback)
        unsubscribe()

        notifier.publish_field(FieldChange(StateField.BUSY, True))

        callback.assert_not_called()
        assert notifier.subscriber_count == 0

    def test_unsubscribe_unknown_is_noop(self):
        ChangeNotifier().unsubscribe(MagicMock())

    def test_raising_subscriber_isolated(self):
        notifier = ChangeNotifier()
        after = MagicMock()
        notifier.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        notifier.subscribe(after)

        change = FieldChange(StateField.STATUS_MESSAGE, "Ready")
        notifier.publish_field(change)

        after.assert_called_once_with(change)

    def test_subscriber_may_unsubscribe_during_delivery(self):
        notifier = ChangeNotifier()
        later = MagicMock()

        def _once(change):
            notifier.unsubscribe(_once)

        notifier.subscribe(_once)
        notifier.subscribe(later)
        notifier.publish_field(FieldChange(StateField.BUSY, False))
        notifier.publish_field(FieldChange(StateField.BUSY, True))

        assert later.call_count == 2
        assert notifier.subscriber_count == 1


class TestAvailabilityChannel:
    def test_scoped_per_action(self):
        notifier = ChangeNotifier()
        connect_cb = MagicMock()
        refresh_cb = MagicMock()
        notifier.subscribe_availability(ActionKind.CONNECT, connect_cb)
        notifier.subscribe_availability(ActionKind.REFRESH, refresh_cb)

        notifier.publish_availability(ActionKind.CONNECT, False)

        connect_cb.assert_called_once_with(ActionKind.CONNECT, False)
        refresh_cb.assert_not_called()

    def test_unsubscribe(self):
        notifier = ChangeNotifier()
        callback = MagicMock()
        notifier.subscribe_availability(ActionKind.REMOVE, callback)
        notifier.unsubscribe_availability(ActionKind.REMOVE, callback)

        notifier.publish_availability(ActionKind.REMOVE, True)

        callback.assert_not_called()


class TestSnapshotChannel:
    def test_publish(self):
        notifier = ChangeNotifier()
        callback = MagicMock()
        unsubscribe = notifier.subscribe_snapshot(callback)
        snapshot = CoordinatorSnapshot(status_message="Ready")

        notifier.publish_snapshot(snapshot)
        unsubscribe()
        notifier.publish_snapshot(snapshot)

        callback.assert_called_once_with(snapshot)
