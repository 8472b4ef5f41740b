from __future__ import annotations

from typing import Any, Optional

from gymdesk.core.errors import (
    DuplicateActiveMembership,
    InvalidAmount,
    InvalidMembershipDates,
    InvalidPlan,
    MembershipNotFound,
    NotFound,
    PaymentExceedsBalance,
)
from gymdesk.models.membership import Membership
from gymdesk.models.plan import Plan
from gymdesk.schemas.membership import MembershipCreate, MembershipUpdate
from gymdesk.services import notifications
from gymdesk.services.membership import compute_end_date, ensure_transition
from gymdesk.services.money import amount_to_cents
from gymdesk.services.store import GymStore

# Columns that cannot be cleared through a partial update.
_REQUIRED_FIELDS = {"start_date", "end_date", "status"}


def _resolve_plan(store: GymStore, plan_id: Optional[int], tenant_id: int) -> Optional[Plan]:
    if plan_id is None:
        return None
    plan = store.find_plan(plan_id, tenant_id)
    if plan is None:
        raise NotFound("Plan not found")
    if not plan.active:
        raise InvalidPlan(f"Plan '{plan.name}' is not active")
    return plan


def _resolve_price_cents(payload: MembershipCreate, plan: Optional[Plan]) -> int:
    if payload.price_cents is not None:
        return payload.price_cents
    if payload.price is not None:
        return amount_to_cents(payload.price)
    if plan is not None:
        return plan.price_cents
    raise InvalidAmount("Membership price is required when no plan is selected")


def create_membership(
    store: GymStore,
    payload: MembershipCreate,
    *,
    tenant_id: int,
    created_by: Optional[int],
) -> Membership:
    with store.transaction():
        member = store.lock_member(payload.member_id, tenant_id)
        if member is None:
            raise NotFound("Member not found")
        if store.find_active_or_pending_memberships(member.id, tenant_id):
            raise DuplicateActiveMembership()

        plan = _resolve_plan(store, payload.plan_id, tenant_id)
        price_cents = _resolve_price_cents(payload, plan)
        end_date = compute_end_date(payload.start_date, plan.duration_days if plan else None)

        membership = store.insert_membership(
            tenant_id=tenant_id,
            member_id=member.id,
            plan_id=plan.id if plan else None,
            start_date=payload.start_date,
            end_date=end_date,
            price_cents=price_cents,
            status=payload.status,
            notes=payload.notes,
            created_by=created_by,
        )
    notifications.notify_membership_created(membership)
    return membership


def get_membership(store: GymStore, membership_id: int, tenant_id: int) -> Membership:
    membership = store.find_membership_by_id(membership_id, tenant_id)
    if membership is None:
        raise MembershipNotFound()
    return membership


def list_memberships(store: GymStore, tenant_id: int) -> list[Membership]:
    return store.find_memberships_by_tenant(tenant_id)


def list_member_memberships(store: GymStore, member_id: int, tenant_id: int) -> list[Membership]:
    if store.find_member(member_id, tenant_id) is None:
        raise NotFound("Member not found")
    return store.find_memberships_by_member(member_id, tenant_id)


def update_membership(
    store: GymStore,
    membership_id: int,
    tenant_id: int,
    payload: MembershipUpdate,
) -> Membership:
    """Apply only the fields present in ``payload``.

    A new price may not drop below what has already been paid, and a status
    change must be a legal lifecycle step.
    """
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    with store.transaction():
        membership = store.lock_membership(membership_id, tenant_id)
        if membership is None:
            raise MembershipNotFound()

        values: dict[str, Any] = {}
        price_cents = changes.pop("price_cents", None)
        price = changes.pop("price", None)
        if price_cents is None and price is not None:
            price_cents = amount_to_cents(price)
        if price_cents is not None:
            paid_cents = store.paid_cents_for_membership(membership.id, tenant_id)
            if price_cents < paid_cents:
                raise PaymentExceedsBalance("Membership price cannot be lower than the amount already paid")
            values["price_cents"] = price_cents

        if "plan_id" in changes:
            plan_id = changes.pop("plan_id")
            if plan_id is not None and plan_id != membership.plan_id:
                _resolve_plan(store, plan_id, tenant_id)
            values["plan_id"] = plan_id

        target_status = changes.pop("status", None)
        if target_status is not None:
            ensure_transition(membership.status, target_status)
            values["status"] = target_status

        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            values[field] = value

        start_date = values.get("start_date", membership.start_date)
        end_date = values.get("end_date", membership.end_date)
        if end_date < start_date:
            raise InvalidMembershipDates()

        store.update_membership(membership.id, tenant_id, values)
        updated = store.find_membership_by_id(membership.id, tenant_id)
    notifications.notify_membership_updated(updated, sorted(values))
    return updated


def delete_membership(store: GymStore, membership_id: int, tenant_id: int) -> bool:
    with store.transaction():
        deleted = store.delete_membership(membership_id, tenant_id)
    if deleted:
        notifications.notify_membership_deleted(membership_id, tenant_id)
    return deleted > 0
