"""Abstract interfaces for the collaborators the coordinator drives."""

from __future__ import annotations

import abc

from routerscope.models.target import Target


class DeviceApiClient(abc.ABC):
    """Request/response client for a router's management API.

    Implementations write results into the target they are handed
    (``state``, ``system_info``, ``interfaces`` ...) rather than returning
    them, and never add or remove targets from any registry.
    """

    @abc.abstractmethod
    async def connect(self, target: Target) -> bool:
        """Open a session to *target*.

        Returns True on success. On failure returns False and leaves the
        reason in the target's own status (``target.mark_failed(reason)``).
        """

    @abc.abstractmethod
    def disconnect(self, target: Target) -> None:
        """Close the session to *target*. Must be idempotent."""

    @abc.abstractmethod
    async def get_system_info(self, target: Target) -> None:
        """Fetch system identity/resource data into ``target.system_info``."""

    @abc.abstractmethod
    async def get_network_interfaces(self, target: Target) -> None:
        """Fetch interface list into ``target.interfaces``."""

    @abc.abstractmethod
    async def get_dhcp_leases(self, target: Target) -> None:
        """Fetch the address-lease table into ``target.dhcp_leases``."""

    @abc.abstractmethod
    async def get_log_entries(self, target: Target, count: int) -> None:
        """Fetch the most recent *count* log entries into ``target.log_entries``."""


class PollingClient(abc.ABC):
    """Polling-protocol (SNMP-style) client. Held by the coordinator, not driven."""

    @abc.abstractmethod
    async def poll(self, target: Target) -> None:
        """Collect one round of polled counters for *target*."""


class StatisticsService(abc.ABC):
    """Aggregates collected data across targets. Held by the coordinator, not driven."""

    @abc.abstractmethod
    def record(self, target: Target) -> None:
        """Fold the target's latest data into the aggregate statistics."""
