from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from gymdesk.auth.deps import require_roles
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.dashboard import MemberDetailsOut
from gymdesk.schemas.member import MemberCreate, MemberListItem, MemberOut, MemberUpdate
from gymdesk.services import dashboard as dashboard_service
from gymdesk.services import members as members_service
from gymdesk.services.store import GymStore, get_store

router = APIRouter(prefix="/members", tags=["members"])

READ_ROLES = (STAFF_ROLE, ADMIN_ROLE)
WRITE_ROLES = READ_ROLES
DELETE_ROLES = (ADMIN_ROLE,)


@router.get("", response_model=list[MemberListItem])
def list_members(
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> list[MemberListItem]:
    return dashboard_service.list_members_with_balance(store, current_user.tenant_id)


@router.post("", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def create_member(
    payload: MemberCreate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*WRITE_ROLES)),
) -> MemberOut:
    member = members_service.create_member(store, payload, tenant_id=current_user.tenant_id)
    return MemberOut.model_validate(member)


@router.get("/{member_id}", response_model=MemberOut)
def get_member(
    member_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> MemberOut:
    return MemberOut.model_validate(members_service.get_member(store, member_id, current_user.tenant_id))


@router.get("/{member_id}/details", response_model=MemberDetailsOut)
def get_member_details(
    member_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*READ_ROLES)),
) -> MemberDetailsOut:
    return dashboard_service.get_member_details(store, member_id, current_user.tenant_id)


@router.put("/{member_id}", response_model=MemberOut)
@router.patch("/{member_id}", response_model=MemberOut)
def update_member(
    member_id: int,
    payload: MemberUpdate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*WRITE_ROLES)),
) -> MemberOut:
    member = members_service.update_member(store, member_id, current_user.tenant_id, payload)
    return MemberOut.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DELETE_ROLES)),
) -> None:
    if not members_service.delete_member(store, member_id, current_user.tenant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
