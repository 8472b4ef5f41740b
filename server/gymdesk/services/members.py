from __future__ import annotations

from typing import Any

from gymdesk.core.errors import NotFound
from gymdesk.models.member import Member
from gymdesk.schemas.member import MemberCreate, MemberUpdate
from gymdesk.services.store import GymStore

_REQUIRED_FIELDS = {"full_name", "status"}


def create_member(store: GymStore, payload: MemberCreate, *, tenant_id: int) -> Member:
    with store.transaction():
        member = store.insert_member(tenant_id=tenant_id, **payload.model_dump())
    return member


def get_member(store: GymStore, member_id: int, tenant_id: int) -> Member:
    member = store.find_member(member_id, tenant_id)
    if member is None:
        raise NotFound("Member not found")
    return member


def update_member(store: GymStore, member_id: int, tenant_id: int, payload: MemberUpdate) -> Member:
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    values = {key: value for key, value in changes.items() if value is not None or key not in _REQUIRED_FIELDS}
    with store.transaction():
        if not store.update_member(member_id, tenant_id, values):
            raise NotFound("Member not found")
        member = store.find_member(member_id, tenant_id)
    return member


def delete_member(store: GymStore, member_id: int, tenant_id: int) -> bool:
    """Delete a member together with its memberships and their payments."""
    with store.transaction():
        deleted = store.delete_member(member_id, tenant_id)
    return deleted > 0
