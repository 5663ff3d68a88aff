"""Router target record as consumed by the coordinator."""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ConnectionState(StrEnum):
    """Connection status of a target."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


def new_target_id() -> str:
    """Return a fresh unique target identifier."""
    return str(uuid.uuid4())


class Target(BaseModel):
    """One monitored router.

    Identity is the ``id`` field: two records with the same id compare equal
    regardless of their other fields. Connection status and fetched data are
    written by the device-API collaborator through the ``mark_*`` methods and
    the data fields; registry membership is owned by the coordinator.
    """
    model_config = {"frozen": False, "validate_assignment": True}

    id: str = Field(default_factory=new_target_id)
    name: str = ""
    address: str = ""
    port: int = Field(default=8728, ge=1, le=65535, description="Device API port")
    username: str = ""
    password: str = Field(default="", exclude=True, repr=False)
    use_polling: bool = False
    polling_community: str = "public"
    polling_port: int = Field(default=161, ge=1, le=65535)

    state: ConnectionState = ConnectionState.DISCONNECTED
    failure_reason: str | None = None

    # Populated by the device-API collaborator
    system_info: dict[str, Any] | None = None
    interfaces: list[dict[str, Any]] = Field(default_factory=list)
    dhcp_leases: list[dict[str, Any]] = Field(default_factory=list)
    log_entries: list[dict[str, Any]] = Field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Target):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    @property
    def status_text(self) -> str:
        """Human-readable connection status; the reason text when failed."""
        if self.state == ConnectionState.FAILED:
            return self.failure_reason or "Failed"
        return self.state.value.capitalize()

    def mark_connecting(self) -> None:
        self.state = ConnectionState.CONNECTING
        self.failure_reason = None

    def mark_connected(self) -> None:
        self.state = ConnectionState.CONNECTED
        self.failure_reason = None

    def mark_failed(self, reason: str) -> None:
        self.state = ConnectionState.FAILED
        self.failure_reason = reason

    def mark_disconnected(self) -> None:
        self.state = ConnectionState.DISCONNECTED
        self.failure_reason = None
