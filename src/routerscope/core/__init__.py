"""Core coordination layer."""

from routerscope.core.coordinator import ConnectionLifecycleCoordinator
from routerscope.core.fetch import run_fetch_sequence
from routerscope.core.notifier import ChangeNotifier

__all__ = [
    "ChangeNotifier",
    "ConnectionLifecycleCoordinator",
    "run_fetch_sequence",
]
