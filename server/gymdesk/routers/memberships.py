from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from gymdesk.auth.deps import require_roles
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.membership import MembershipCreate, MembershipOut, MembershipUpdate
from gymdesk.services import memberships as memberships_service
from gymdesk.services.store import GymStore, get_store

router = APIRouter(prefix="/memberships", tags=["memberships"])

DESK_ROLES = (STAFF_ROLE, ADMIN_ROLE)
DELETE_ROLES = (ADMIN_ROLE,)


@router.get("", response_model=list[MembershipOut])
def list_memberships(
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> list[MembershipOut]:
    memberships = memberships_service.list_memberships(store, current_user.tenant_id)
    return [MembershipOut.model_validate(item) for item in memberships]


@router.post("", response_model=MembershipOut, status_code=status.HTTP_201_CREATED)
def create_membership(
    payload: MembershipCreate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> MembershipOut:
    membership = memberships_service.create_membership(
        store, payload, tenant_id=current_user.tenant_id, created_by=current_user.id
    )
    return MembershipOut.model_validate(membership)


@router.get("/member/{member_id}", response_model=list[MembershipOut])
def list_member_memberships(
    member_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> list[MembershipOut]:
    memberships = memberships_service.list_member_memberships(store, member_id, current_user.tenant_id)
    return [MembershipOut.model_validate(item) for item in memberships]


@router.get("/{membership_id}", response_model=MembershipOut)
def get_membership(
    membership_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> MembershipOut:
    membership = memberships_service.get_membership(store, membership_id, current_user.tenant_id)
    return MembershipOut.model_validate(membership)


@router.put("/{membership_id}", response_model=MembershipOut)
@router.patch("/{membership_id}", response_model=MembershipOut)
def update_membership(
    membership_id: int,
    payload: MembershipUpdate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> MembershipOut:
    membership = memberships_service.update_membership(store, membership_id, current_user.tenant_id, payload)
    return MembershipOut.model_validate(membership)


@router.delete("/{membership_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_membership(
    membership_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DELETE_ROLES)),
) -> None:
    if not memberships_service.delete_membership(store, membership_id, current_user.tenant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Membership not found")
