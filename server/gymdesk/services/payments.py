from __future__ import annotations

from typing import Iterable, Optional

from gymdesk.core.config import settings
from gymdesk.core.errors import (
    InvalidAmount,
    InvalidMembershipState,
    MembershipNotFound,
    NotFound,
    PaymentExceedsBalance,
)
from gymdesk.models.membership import Membership
from gymdesk.models.payment import Payment
from gymdesk.schemas.payment import PaymentCreate, PaymentStatus
from gymdesk.services import notifications
from gymdesk.services.money import amount_to_cents, cents_to_amount
from gymdesk.services.store import GymStore


def _resolve_amount_cents(payload: PaymentCreate) -> int:
    if payload.amount_cents is not None:
        amount_cents = payload.amount_cents
    elif payload.amount is not None:
        amount_cents = amount_to_cents(payload.amount)
    else:
        raise InvalidAmount("Payment amount is required")
    if amount_cents <= 0:
        raise InvalidAmount("Payment amount must be greater than zero")
    return amount_cents


def _ensure_within_balance(
    store: GymStore,
    membership: Membership,
    amount_cents: int,
    *,
    exclude_payment_id: Optional[int] = None,
) -> None:
    paid_cents = store.paid_cents_for_membership(
        membership.id, membership.tenant_id, exclude_payment_id=exclude_payment_id
    )
    if paid_cents + amount_cents > membership.price_cents:
        notifications.notify_payment_rejected(membership, paid_cents, amount_cents)
        remaining = max(membership.price_cents - paid_cents, 0)
        raise PaymentExceedsBalance(
            f"Payment of {cents_to_amount(amount_cents)} exceeds the remaining balance of "
            f"{cents_to_amount(remaining)}"
        )


def record_payment(
    store: GymStore,
    payload: PaymentCreate,
    *,
    tenant_id: int,
    created_by: Optional[int],
    eligible_statuses: Optional[Iterable[str]] = None,
) -> Payment:
    amount_cents = _resolve_amount_cents(payload)
    eligible = set(eligible_statuses if eligible_statuses is not None else settings.PAYMENT_ELIGIBLE_STATUSES)

    with store.transaction():
        membership = store.lock_membership(payload.membership_id, tenant_id)
        if membership is None:
            raise MembershipNotFound()
        if membership.status not in eligible:
            raise InvalidMembershipState(f"Membership is {membership.status} and cannot accept payments")
        if payload.status == "PAID":
            _ensure_within_balance(store, membership, amount_cents)

        payment = store.insert_payment(
            tenant_id=tenant_id,
            membership_id=membership.id,
            amount_cents=amount_cents,
            method=payload.method,
            status=payload.status,
            notes=payload.notes,
            created_by=created_by,
        )
        payment = store.find_payment_by_id(payment.id, tenant_id)
    notifications.notify_payment_recorded(payment)
    return payment


def get_payment(store: GymStore, payment_id: int, tenant_id: int) -> Payment:
    payment = store.find_payment_by_id(payment_id, tenant_id)
    if payment is None:
        raise NotFound("Payment not found")
    return payment


def list_payments(store: GymStore, tenant_id: int) -> list[Payment]:
    return store.find_payments_by_tenant(tenant_id)


def list_membership_payments(store: GymStore, membership_id: int, tenant_id: int) -> list[Payment]:
    if store.find_membership_by_id(membership_id, tenant_id) is None:
        raise MembershipNotFound()
    return store.find_payments_by_membership(membership_id, tenant_id)


def update_payment_status(
    store: GymStore,
    payment_id: int,
    tenant_id: int,
    status: PaymentStatus,
) -> Payment:
    """Toggle a payment between PAID and VOID.

    Restoring a voided payment counts it against the membership price again,
    so the balance cap is checked before the change is written.
    """
    with store.transaction():
        payment = store.find_payment_by_id(payment_id, tenant_id)
        if payment is None:
            raise NotFound("Payment not found")
        previous = payment.status
        if previous == status:
            return payment

        membership = store.lock_membership(payment.membership_id, tenant_id)
        if membership is None:
            raise MembershipNotFound()
        if status == "PAID":
            _ensure_within_balance(store, membership, payment.amount_cents, exclude_payment_id=payment.id)

        store.update_payment_status(payment.id, tenant_id, status)
        payment = store.find_payment_by_id(payment.id, tenant_id)
    notifications.notify_payment_status_changed(payment, previous)
    return payment


def delete_payment(store: GymStore, payment_id: int, tenant_id: int) -> bool:
    with store.transaction():
        deleted = store.delete_payment(payment_id, tenant_id)
    if deleted:
        notifications.notify_payment_deleted(payment_id, tenant_id)
    return deleted > 0
