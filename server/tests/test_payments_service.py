from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from gymdesk.core.errors import (
    InvalidAmount,
    InvalidMembershipState,
    MembershipNotFound,
    NotFound,
    PaymentExceedsBalance,
)
from gymdesk.models.membership import Membership
from gymdesk.schemas.membership import MembershipCreate
from gymdesk.schemas.payment import PaymentCreate
from gymdesk.services import dashboard as dashboard_service
from gymdesk.services import memberships as memberships_service
from gymdesk.services import payments as payments_service


@pytest.fixture()
def membership(store, tenant, admin_user, sample_member, monthly_plan) -> Membership:
    return memberships_service.create_membership(
        store,
        MembershipCreate(member_id=sample_member.id, plan_id=monthly_plan.id, start_date=date(2026, 1, 1)),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )


def _pay(store, tenant, user, membership_id, **fields):
    return payments_service.record_payment(
        store,
        PaymentCreate(membership_id=membership_id, **fields),
        tenant_id=tenant.id,
        created_by=user.id,
    )


def _balance(store, tenant, member):
    details = dashboard_service.get_member_details(store, member.id, tenant.id)
    entry = details.memberships[0]
    return entry.paid, entry.remaining


def test_partial_payments_up_to_price(store, tenant, admin_user, sample_member, membership):
    _pay(store, tenant, admin_user, membership.id, amount_cents=6000)
    assert _balance(store, tenant, sample_member) == (Decimal("60.00"), Decimal("40.00"))

    with pytest.raises(PaymentExceedsBalance):
        _pay(store, tenant, admin_user, membership.id, amount_cents=5000)
    assert _balance(store, tenant, sample_member) == (Decimal("60.00"), Decimal("40.00"))

    _pay(store, tenant, admin_user, membership.id, amount_cents=4000)
    assert _balance(store, tenant, sample_member) == (Decimal("100.00"), Decimal("0.00"))
    assert store.paid_cents_for_membership(membership.id, tenant.id) <= membership.price_cents


def test_payment_records_creator_and_member_name(store, tenant, staff_user, sample_member, membership):
    payment = _pay(store, tenant, staff_user, membership.id, amount=Decimal("25.50"), method="CARD", notes="Desk")

    assert payment.amount_cents == 2550
    assert payment.status == "PAID"
    assert payment.method == "CARD"
    assert payment.created_by == staff_user.id
    assert payment.member_name == "Omar Hassan"
    assert payment.created_by_name == "Front Desk"


def test_amount_with_sub_cent_precision_is_rejected(store, tenant, admin_user, membership):
    with pytest.raises(InvalidAmount):
        _pay(store, tenant, admin_user, membership.id, amount=Decimal("10.005"))


def test_pending_membership_does_not_accept_payments(store, tenant, admin_user, sample_member):
    pending = memberships_service.create_membership(
        store,
        MembershipCreate(member_id=sample_member.id, start_date=date(2026, 1, 1), price_cents=5000, status="PENDING"),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )
    with pytest.raises(InvalidMembershipState):
        _pay(store, tenant, admin_user, pending.id, amount_cents=1000)


def test_expired_membership_accepts_payments_by_default(store, tenant, admin_user, sample_member):
    expired = memberships_service.create_membership(
        store,
        MembershipCreate(member_id=sample_member.id, start_date=date(2025, 1, 1), price_cents=5000, status="EXPIRED"),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )
    payment = _pay(store, tenant, admin_user, expired.id, amount_cents=5000)
    assert payment.status == "PAID"


def test_eligible_statuses_can_be_narrowed(store, tenant, admin_user, sample_member):
    expired = memberships_service.create_membership(
        store,
        MembershipCreate(member_id=sample_member.id, start_date=date(2025, 1, 1), price_cents=5000, status="EXPIRED"),
        tenant_id=tenant.id,
        created_by=admin_user.id,
    )
    with pytest.raises(InvalidMembershipState):
        payments_service.record_payment(
            store,
            PaymentCreate(membership_id=expired.id, amount_cents=1000),
            tenant_id=tenant.id,
            created_by=admin_user.id,
            eligible_statuses=["ACTIVE"],
        )


def test_missing_membership(store, tenant, other_tenant, admin_user, other_admin, membership):
    with pytest.raises(MembershipNotFound):
        _pay(store, tenant, admin_user, 9999, amount_cents=100)
    with pytest.raises(MembershipNotFound):
        _pay(store, other_tenant, other_admin, membership.id, amount_cents=100)


def test_void_then_paid_restores_totals(store, tenant, admin_user, membership):
    first = _pay(store, tenant, admin_user, membership.id, amount_cents=3000)
    second = _pay(store, tenant, admin_user, membership.id, amount_cents=2000)
    assert dashboard_service.get_total_revenue(store, tenant.id) == Decimal("50.00")

    voided = payments_service.update_payment_status(store, first.id, tenant.id, "VOID")
    assert voided.status == "VOID"
    assert dashboard_service.get_total_revenue(store, tenant.id) == Decimal("20.00")
    assert dashboard_service.get_member_details(store, membership.member_id, tenant.id).stats.total_paid == Decimal(
        "20.00"
    )

    restored = payments_service.update_payment_status(store, first.id, tenant.id, "PAID")
    assert restored.status == "PAID"
    assert dashboard_service.get_total_revenue(store, tenant.id) == Decimal("50.00")
    assert dashboard_service.get_member_details(store, membership.member_id, tenant.id).stats.total_paid == Decimal(
        "50.00"
    )

    assert memberships_service.get_membership(store, membership.id, tenant.id).price_cents == 10000
    untouched = payments_service.get_payment(store, second.id, tenant.id)
    assert (untouched.amount_cents, untouched.status) == (2000, "PAID")


def test_restoring_void_payment_rechecks_balance(store, tenant, admin_user, membership):
    first = _pay(store, tenant, admin_user, membership.id, amount_cents=6000)
    payments_service.update_payment_status(store, first.id, tenant.id, "VOID")
    _pay(store, tenant, admin_user, membership.id, amount_cents=8000)

    with pytest.raises(PaymentExceedsBalance):
        payments_service.update_payment_status(store, first.id, tenant.id, "PAID")
    assert payments_service.get_payment(store, first.id, tenant.id).status == "VOID"


def test_void_payment_skips_balance_check(store, tenant, admin_user, membership):
    _pay(store, tenant, admin_user, membership.id, amount_cents=10000)
    void = _pay(store, tenant, admin_user, membership.id, amount_cents=500, status="VOID")
    assert void.status == "VOID"
    assert store.paid_cents_for_membership(membership.id, tenant.id) == 10000


def test_same_status_is_a_no_op(store, tenant, admin_user, membership):
    payment = _pay(store, tenant, admin_user, membership.id, amount_cents=1000)
    again = payments_service.update_payment_status(store, payment.id, tenant.id, "PAID")
    assert again.id == payment.id
    assert again.status == "PAID"


def test_status_change_for_missing_payment(store, tenant):
    with pytest.raises(NotFound):
        payments_service.update_payment_status(store, 12345, tenant.id, "VOID")


def test_delete_payment_twice(store, tenant, admin_user, membership):
    payment_id = _pay(store, tenant, admin_user, membership.id, amount_cents=1000).id
    assert payments_service.delete_payment(store, payment_id, tenant.id) is True
    assert payments_service.delete_payment(store, payment_id, tenant.id) is False
    with pytest.raises(NotFound):
        payments_service.get_payment(store, payment_id, tenant.id)


def test_list_membership_payments(store, tenant, other_tenant, admin_user, membership):
    _pay(store, tenant, admin_user, membership.id, amount_cents=1000)
    _pay(store, tenant, admin_user, membership.id, amount_cents=2000)

    payments = payments_service.list_membership_payments(store, membership.id, tenant.id)
    assert sorted(payment.amount_cents for payment in payments) == [1000, 2000]
    assert len(payments_service.list_payments(store, tenant.id)) == 2
    assert payments_service.list_payments(store, other_tenant.id) == []

    with pytest.raises(MembershipNotFound):
        payments_service.list_membership_payments(store, membership.id, other_tenant.id)


def test_amount_and_cents_must_agree():
    assert PaymentCreate(membership_id=1, amount=Decimal("12.30"), amount_cents=1230).amount_cents == 1230
    with pytest.raises(ValidationError):
        PaymentCreate(membership_id=1, amount=Decimal("12.30"), amount_cents=1200)
    with pytest.raises(ValidationError):
        PaymentCreate(membership_id=1, amount_cents=2**31)
