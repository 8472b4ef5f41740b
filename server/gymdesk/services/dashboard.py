from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from gymdesk.core.errors import NotFound
from gymdesk.schemas.dashboard import DashboardSummary, MemberDetailsOut, MemberStats
from gymdesk.schemas.member import MemberListItem, MemberOut
from gymdesk.schemas.membership import MembershipBalanceOut, MembershipOut
from gymdesk.schemas.payment import PaymentOut
from gymdesk.services.membership import derive_membership_status
from gymdesk.services.money import cents_to_amount
from gymdesk.services.store import GymStore

ZERO = Decimal("0.00")


def get_member_details(store: GymStore, member_id: int, tenant_id: int) -> MemberDetailsOut:
    """Member profile with every membership, its payments and what is still owed."""
    member = store.find_member(member_id, tenant_id)
    if member is None:
        raise NotFound("Member not found")

    memberships = store.find_memberships_by_member(member.id, tenant_id)
    paid_by_membership = store.paid_cents_by_membership(tenant_id, [item.id for item in memberships])

    items: list[MembershipBalanceOut] = []
    total_paid = ZERO
    total_remaining = ZERO
    for membership in memberships:
        paid = cents_to_amount(paid_by_membership.get(membership.id, 0))
        remaining = cents_to_amount(membership.price_cents) - paid
        payments = store.find_payments_by_membership(membership.id, tenant_id)
        items.append(
            MembershipBalanceOut(
                **MembershipOut.model_validate(membership).model_dump(),
                payments=[PaymentOut.model_validate(payment) for payment in payments],
                paid=paid,
                remaining=remaining,
            )
        )
        total_paid += paid
        total_remaining += remaining

    return MemberDetailsOut(
        member=MemberOut.model_validate(member),
        memberships=items,
        stats=MemberStats(total_paid=total_paid, total_remaining=total_remaining),
    )


def get_total_revenue(store: GymStore, tenant_id: int) -> Decimal:
    return cents_to_amount(store.total_paid_cents(tenant_id))


def get_dashboard_summary(
    store: GymStore,
    tenant_id: int,
    now: Optional[datetime] = None,
) -> DashboardSummary:
    """Bucket each member by the latest ACTIVE/EXPIRED membership they hold.

    Members without such a membership only count toward ``total_members``.
    """
    buckets = {"ACTIVE": 0, "EXPIRING_SOON": 0, "EXPIRED": 0}
    for end_date in store.latest_membership_end_dates(tenant_id).values():
        buckets[derive_membership_status(end_date, now)] += 1

    return DashboardSummary(
        total_members=store.count_members(tenant_id),
        active_members=buckets["ACTIVE"],
        expiring_soon_members=buckets["EXPIRING_SOON"],
        expired_members=buckets["EXPIRED"],
        total_revenue=get_total_revenue(store, tenant_id),
    )


def list_members_with_balance(store: GymStore, tenant_id: int) -> list[MemberListItem]:
    owed = store.price_cents_by_member(tenant_id)
    paid = store.paid_cents_by_member(tenant_id)
    items = []
    for member in store.find_members(tenant_id):
        remaining_cents = max(owed.get(member.id, 0) - paid.get(member.id, 0), 0)
        items.append(
            MemberListItem(
                **MemberOut.model_validate(member).model_dump(),
                remaining_amount=cents_to_amount(remaining_cents),
            )
        )
    return items
