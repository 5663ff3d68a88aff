"""Value types exchanged between the coordinator and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from routerscope.models.target import Target


class ActionKind(StrEnum):
    """Gated coordinator actions, in announcement order."""
    REMOVE = "remove"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    REFRESH = "refresh"


class ActionOutcome(StrEnum):
    """How a gated action ended."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class StateField(StrEnum):
    """Observable coordinator fields."""
    SELECTED_TARGET = "selected_target"
    BUSY = "busy"
    STATUS_MESSAGE = "status_message"


# Fields whose change invalidates every availability predicate
AVAILABILITY_INPUTS = frozenset({StateField.SELECTED_TARGET, StateField.BUSY})


class FetchStep(StrEnum):
    """Post-connect data fetches, in execution order."""
    SYSTEM_INFO = "system_info"
    INTERFACES = "interfaces"
    DHCP_LEASES = "dhcp_leases"
    LOG_ENTRIES = "log_entries"


class FetchPolicy(StrEnum):
    """What happens to the remaining fetches when one of them raises."""
    ABORT_ON_ERROR = "abort"
    CONTINUE_ON_ERROR = "continue"


@dataclass
class FetchReport:
    """Per-step outcome of one fetch sequence."""

    policy: FetchPolicy
    completed: list[FetchStep] = field(default_factory=list)
    errors: dict[FetchStep, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> BaseException | None:
        return next(iter(self.errors.values()), None)

    @property
    def skipped(self) -> list[FetchStep]:
        """Steps never attempted because an earlier step aborted the sequence."""
        done = set(self.completed) | set(self.errors)
        return [step for step in FetchStep if step not in done]


@dataclass(frozen=True)
class FieldChange:
    """Notification that one observable field changed."""

    field: StateField
    value: Any


@dataclass(frozen=True)
class ActionResult:
    """Result of invoking a gated action."""

    action: ActionKind
    outcome: ActionOutcome
    message: str = ""
    error: BaseException | None = None
    fetch_report: FetchReport | None = None


class CoordinatorSnapshot(BaseModel):
    """Consolidated coordinator state pushed to snapshot subscribers."""

    targets: list[Target] = Field(default_factory=list)
    selected_id: str | None = None
    busy: bool = False
    status_message: str = ""
    availability: dict[ActionKind, bool] = Field(default_factory=dict)
