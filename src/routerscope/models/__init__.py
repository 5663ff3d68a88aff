"""Pydantic data models for RouterScope."""

from routerscope.models.coordinator import (
    AVAILABILITY_INPUTS,
    ActionKind,
    ActionOutcome,
    ActionResult,
    CoordinatorSnapshot,
    FetchPolicy,
    FetchReport,
    FetchStep,
    FieldChange,
    StateField,
)
from routerscope.models.target import ConnectionState, Target, new_target_id

__all__ = [
    "AVAILABILITY_INPUTS",
    "ActionKind",
    "ActionOutcome",
    "ActionResult",
    "ConnectionState",
    "CoordinatorSnapshot",
    "FetchPolicy",
    "FetchReport",
    "FetchStep",
    "FieldChange",
    "StateField",
    "Target",
    "new_target_id",
]
