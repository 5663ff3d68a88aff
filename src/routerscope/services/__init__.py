"""Collaborator interfaces consumed by the coordinator."""

from routerscope.services.base import DeviceApiClient, PollingClient, StatisticsService

__all__ = [
    "DeviceApiClient",
    "PollingClient",
    "StatisticsService",
]
