"""Connect / disconnect / refresh endpoints for the selected target."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from routerscope.api.app import get_coordinator
from routerscope.core.coordinator import ConnectionLifecycleCoordinator
from routerscope.models.coordinator import (
    ActionKind,
    ActionOutcome,
    ActionResult,
    CoordinatorSnapshot,
    FetchStep,
)

router = APIRouter(prefix="/actions", tags=["actions"])


class ActionResponse(BaseModel):
    action: ActionKind
    outcome: ActionOutcome
    message: str
    fetched: list[FetchStep] | None = None
    fetch_errors: dict[FetchStep, str] | None = None
    state: CoordinatorSnapshot


def _respond(coordinator: ConnectionLifecycleCoordinator, result: ActionResult) -> ActionResponse:
    if result.outcome == ActionOutcome.SKIPPED:
        raise HTTPException(
            status_code=409, detail=f"Action '{result.action.value}' is not available",
        )
    report = result.fetch_report
    return ActionResponse(
        action=result.action,
        outcome=result.outcome,
        message=result.message,
        fetched=list(report.completed) if report else None,
        fetch_errors={step: str(err) for step, err in report.errors.items()} if report else None,
        state=coordinator.snapshot(),
    )


@router.get("", response_model=dict[ActionKind, bool])
async def get_availability(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> dict[ActionKind, bool]:
    """Return which actions can currently run."""
    return coordinator.availability()


@router.post("/connect", response_model=ActionResponse)
async def connect(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> ActionResponse:
    return _respond(coordinator, await coordinator.connect())


@router.post("/disconnect", response_model=ActionResponse)
async def disconnect(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> ActionResponse:
    return _respond(coordinator, coordinator.disconnect())


@router.post("/refresh", response_model=ActionResponse)
async def refresh(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> ActionResponse:
    return _respond(coordinator, await coordinator.refresh())
