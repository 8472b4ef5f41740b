from __future__ import annotations

from typing import Any

from gymdesk.core.errors import NotFound
from gymdesk.models.plan import Plan
from gymdesk.schemas.plan import PlanCreate, PlanUpdate
from gymdesk.services.money import amount_to_cents
from gymdesk.services.store import GymStore


def create_plan(store: GymStore, payload: PlanCreate, *, tenant_id: int) -> Plan:
    with store.transaction():
        plan = store.insert_plan(
            tenant_id=tenant_id,
            name=payload.name,
            duration_days=payload.duration_days,
            price_cents=payload.price_cents,
            visit_limit=payload.visit_limit,
            active=payload.active,
        )
    return plan


def get_plan(store: GymStore, plan_id: int, tenant_id: int) -> Plan:
    plan = store.find_plan(plan_id, tenant_id)
    if plan is None:
        raise NotFound("Plan not found")
    return plan


def list_plans(store: GymStore, tenant_id: int, *, active_only: bool = False) -> list[Plan]:
    return store.find_plans(tenant_id, active_only=active_only)


def update_plan(store: GymStore, plan_id: int, tenant_id: int, payload: PlanUpdate) -> Plan:
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    price = changes.pop("price", None)
    if changes.get("price_cents") is None:
        changes.pop("price_cents", None)
        if price is not None:
            changes["price_cents"] = amount_to_cents(price)
    # name, duration and the active flag are required columns
    values = {key: value for key, value in changes.items() if value is not None or key == "visit_limit"}

    with store.transaction():
        if not store.update_plan(plan_id, tenant_id, values):
            raise NotFound("Plan not found")
        plan = store.find_plan(plan_id, tenant_id)
    return plan


def delete_plan(store: GymStore, plan_id: int, tenant_id: int) -> bool:
    """Remove a plan; memberships that used it keep their dates and price."""
    with store.transaction():
        deleted = store.delete_plan(plan_id, tenant_id)
    return deleted > 0
