"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from routerscope.models.target import Target
from routerscope.services.base import DeviceApiClient, PollingClient, StatisticsService


@pytest.fixture
def device_api() -> MagicMock:
    """Device-API double whose connect() succeeds and marks the target connected."""
    api = MagicMock(spec=DeviceApiClient)

    async def _connect(target: Target) -> bool:
        target.mark_connected()
        return True

    def _disconnect(target: Target) -> None:
        target.mark_disconnected()

    api.connect = AsyncMock(side_effect=_connect)
    api.disconnect = MagicMock(side_effect=_disconnect)
    api.get_system_info = AsyncMock(return_value=None)
    api.get_network_interfaces = AsyncMock(return_value=None)
    api.get_dhcp_leases = AsyncMock(return_value=None)
    api.get_log_entries = AsyncMock(return_value=None)
    return api


@pytest.fixture
def polling_client() -> MagicMock:
    return MagicMock(spec=PollingClient)


@pytest.fixture
def statistics() -> MagicMock:
    return MagicMock(spec=StatisticsService)


@pytest.fixture
def make_target():
    """Factory for targets with readable names."""
    def _make(name: str = "core-rtr", connected: bool = False) -> Target:
        target = Target(name=name, address="10.0.0.1", username="admin")
        if connected:
            target.mark_connected()
        return target
    return _make
