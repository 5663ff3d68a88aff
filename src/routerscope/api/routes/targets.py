"""Target registry and selection endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from routerscope.api.app import get_coordinator
from routerscope.core.coordinator import ConnectionLifecycleCoordinator
from routerscope.exceptions import TargetNotFoundError
from routerscope.models.coordinator import ActionOutcome, CoordinatorSnapshot
from routerscope.models.target import Target

router = APIRouter(tags=["targets"])


class SelectRequest(BaseModel):
    target_id: str | None = None


@router.get("/state", response_model=CoordinatorSnapshot)
async def get_state(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> CoordinatorSnapshot:
    """Return the consolidated coordinator state."""
    return coordinator.snapshot()


@router.get("/targets", response_model=list[Target])
async def list_targets(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> list[Target]:
    """List registered targets in insertion order."""
    return list(coordinator.targets)


@router.post("/targets", response_model=Target, status_code=201)
async def add_target(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> Target:
    """Register a new target with default settings and select it."""
    return coordinator.add_target()


@router.delete("/targets/selected", response_model=CoordinatorSnapshot)
async def remove_selected(
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> CoordinatorSnapshot:
    """Remove the selected target, disconnecting it first if needed."""
    result = coordinator.remove_selected()
    if result.outcome == ActionOutcome.SKIPPED:
        raise HTTPException(status_code=409, detail="No target selected")
    if result.outcome == ActionOutcome.ERROR:
        raise HTTPException(status_code=502, detail=result.message)
    return coordinator.snapshot()


@router.put("/selection", response_model=CoordinatorSnapshot)
async def select_target(
    request: SelectRequest,
    coordinator: ConnectionLifecycleCoordinator = Depends(get_coordinator),
) -> CoordinatorSnapshot:
    """Select a target by id, or clear the selection with a null id."""
    try:
        coordinator.select(request.target_id)
    except TargetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return coordinator.snapshot()
