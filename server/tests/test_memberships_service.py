from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from gymdesk.core.errors import (
    DuplicateActiveMembership,
    InvalidAmount,
    InvalidMembershipDates,
    InvalidPlan,
    InvalidStatusTransition,
    MembershipNotFound,
    NotFound,
    PaymentExceedsBalance,
)
from gymdesk.models.membership import Membership
from gymdesk.models.payment import Payment
from gymdesk.models.plan import Plan
from gymdesk.schemas.membership import MembershipCreate, MembershipUpdate
from gymdesk.schemas.payment import PaymentCreate
from gymdesk.services import memberships as memberships_service
from gymdesk.services import payments as payments_service

START = date(2026, 1, 1)


def _create(store, tenant, user, member, **fields):
    payload = MembershipCreate(member_id=member.id, start_date=fields.pop("start_date", START), **fields)
    return memberships_service.create_membership(store, payload, tenant_id=tenant.id, created_by=user.id)


def test_create_membership_from_plan(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)

    assert membership.id is not None
    assert membership.end_date == date(2026, 1, 31)
    assert membership.price_cents == 10000
    assert membership.status == "ACTIVE"
    assert membership.created_by == admin_user.id
    assert membership.tenant_id == tenant.id


def test_explicit_price_wins_over_plan_price(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id, price=Decimal("75.50"))
    assert membership.price_cents == 7550


def test_membership_without_plan_uses_default_duration(store, tenant, admin_user, sample_member):
    membership = _create(store, tenant, admin_user, sample_member, price_cents=25000)
    assert membership.plan_id is None
    assert membership.end_date == START + timedelta(days=30)


def test_membership_without_plan_or_price_is_rejected(store, tenant, admin_user, sample_member):
    with pytest.raises(InvalidAmount):
        _create(store, tenant, admin_user, sample_member)


def test_second_open_membership_is_rejected(store, db_session, tenant, admin_user, sample_member, monthly_plan):
    _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)

    with pytest.raises(DuplicateActiveMembership):
        _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id, start_date=date(2026, 2, 1))

    assert db_session.query(Membership).filter_by(member_id=sample_member.id).count() == 1


def test_pending_membership_also_blocks_a_new_one(store, tenant, admin_user, sample_member):
    _create(store, tenant, admin_user, sample_member, price_cents=5000, status="PENDING")
    with pytest.raises(DuplicateActiveMembership):
        _create(store, tenant, admin_user, sample_member, price_cents=5000)


def test_new_membership_allowed_after_previous_expires(store, tenant, admin_user, sample_member, monthly_plan):
    first = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)
    memberships_service.update_membership(store, first.id, tenant.id, MembershipUpdate(status="EXPIRED"))

    renewal = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id, start_date=date(2026, 1, 31))
    assert renewal.status == "ACTIVE"
    assert len(memberships_service.list_member_memberships(store, sample_member.id, tenant.id)) == 2


def test_inactive_plan_is_rejected(store, db_session, tenant, admin_user, sample_member):
    plan = Plan(tenant_id=tenant.id, name="Legacy", duration_days=30, price_cents=5000, active=False)
    db_session.add(plan)
    db_session.commit()

    with pytest.raises(InvalidPlan):
        _create(store, tenant, admin_user, sample_member, plan_id=plan.id)


def test_missing_plan_is_not_found(store, tenant, admin_user, sample_member):
    with pytest.raises(NotFound):
        _create(store, tenant, admin_user, sample_member, plan_id=9999)


def test_member_from_another_tenant_is_not_found(store, other_tenant, other_admin, sample_member):
    with pytest.raises(NotFound):
        _create(store, other_tenant, other_admin, sample_member, price_cents=5000)


def test_update_changes_only_supplied_fields(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)

    updated = memberships_service.update_membership(
        store, membership.id, tenant.id, MembershipUpdate(notes="Paid at front desk")
    )

    assert updated.notes == "Paid at front desk"
    assert updated.start_date == START
    assert updated.end_date == date(2026, 1, 31)
    assert updated.price_cents == 10000
    assert updated.status == "ACTIVE"


def test_update_rejects_illegal_status_change(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)
    memberships_service.update_membership(store, membership.id, tenant.id, MembershipUpdate(status="CANCELLED"))

    with pytest.raises(InvalidStatusTransition):
        memberships_service.update_membership(store, membership.id, tenant.id, MembershipUpdate(status="ACTIVE"))
    assert memberships_service.get_membership(store, membership.id, tenant.id).status == "CANCELLED"


def test_update_rejects_end_before_start(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)
    with pytest.raises(InvalidMembershipDates):
        memberships_service.update_membership(
            store, membership.id, tenant.id, MembershipUpdate(end_date=date(2025, 12, 1))
        )


def test_update_rejects_price_below_paid_amount(store, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)
    payments_service.record_payment(
        store,
        PaymentCreate(membership_id=membership.id, amount_cents=6000),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )

    with pytest.raises(PaymentExceedsBalance):
        memberships_service.update_membership(store, membership.id, tenant.id, MembershipUpdate(price_cents=5000))

    lowered = memberships_service.update_membership(store, membership.id, tenant.id, MembershipUpdate(price_cents=6000))
    assert lowered.price_cents == 6000


def test_update_missing_membership_is_not_found(store, tenant):
    with pytest.raises(NotFound):
        memberships_service.update_membership(store, 404, tenant.id, MembershipUpdate(notes="x"))


def test_get_membership_from_another_tenant_is_not_found(store, tenant, other_tenant, admin_user, sample_member):
    membership = _create(store, tenant, admin_user, sample_member, price_cents=5000)
    with pytest.raises(MembershipNotFound):
        memberships_service.get_membership(store, membership.id, other_tenant.id)


def test_delete_membership_twice(store, db_session, tenant, admin_user, sample_member, monthly_plan):
    membership = _create(store, tenant, admin_user, sample_member, plan_id=monthly_plan.id)
    membership_id = membership.id
    payments_service.record_payment(
        store,
        PaymentCreate(membership_id=membership.id, amount_cents=2500),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )

    assert memberships_service.delete_membership(store, membership_id, tenant.id) is True
    assert memberships_service.delete_membership(store, membership_id, tenant.id) is False
    assert db_session.query(Payment).filter_by(membership_id=membership_id).count() == 0


def test_delete_in_another_tenant_reports_false(store, tenant, other_tenant, admin_user, sample_member):
    membership = _create(store, tenant, admin_user, sample_member, price_cents=5000)
    assert memberships_service.delete_membership(store, membership.id, other_tenant.id) is False
    assert memberships_service.get_membership(store, membership.id, tenant.id).id == membership.id
