from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gymdesk.auth.deps import require_roles
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.plan import PlanCreate, PlanOut, PlanUpdate
from gymdesk.services import plans as plans_service
from gymdesk.services.store import GymStore, get_store

router = APIRouter(prefix="/plans", tags=["plans"])

READ_ROLES = (STAFF_ROLE, ADMIN_ROLE)
DELETE_ROLES = (ADMIN_ROLE,)


@router.get("", response_model=list[PlanOut])
def list_plans(
    active_only: bool = Query(default=False),
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> list[PlanOut]:
    plans = plans_service.list_plans(store, current_user.tenant_id, active_only=active_only)
    return [PlanOut.model_validate(plan) for plan in plans]


@router.post("", response_model=PlanOut, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanCreate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> PlanOut:
    return PlanOut.model_validate(plans_service.create_plan(store, payload, tenant_id=current_user.tenant_id))


@router.get("/{plan_id}", response_model=PlanOut)
def get_plan(
    plan_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> PlanOut:
    return PlanOut.model_validate(plans_service.get_plan(store, plan_id, current_user.tenant_id))


@router.put("/{plan_id}", response_model=PlanOut)
@router.patch("/{plan_id}", response_model=PlanOut)
def update_plan(
    plan_id: int,
    payload: PlanUpdate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> PlanOut:
    return PlanOut.model_validate(plans_service.update_plan(store, plan_id, current_user.tenant_id, payload))


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(
    plan_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DELETE_ROLES)),
) -> None:
    if not plans_service.delete_plan(store, plan_id, current_user.tenant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
