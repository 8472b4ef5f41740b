from __future__ import annotations

import logging
from typing import Optional

from gymdesk.models.membership import Membership
from gymdesk.models.payment import Payment

logger = logging.getLogger(__name__)


def notify_membership_created(membership: Membership) -> None:
    logger.info(
        "membership_created",
        extra={
            "tenant_id": membership.tenant_id,
            "membership_id": membership.id,
            "member_id": membership.member_id,
            "plan_id": membership.plan_id,
            "end_date": membership.end_date.isoformat(),
            "price_cents": membership.price_cents,
            "membership_status": membership.status,
        },
    )


def notify_membership_updated(membership: Membership, changed: list[str]) -> None:
    logger.info(
        "membership_updated",
        extra={
            "tenant_id": membership.tenant_id,
            "membership_id": membership.id,
            "changed_fields": changed,
            "membership_status": membership.status,
        },
    )


def notify_membership_deleted(membership_id: int, tenant_id: int) -> None:
    logger.info("membership_deleted", extra={"tenant_id": tenant_id, "membership_id": membership_id})


def notify_payment_recorded(payment: Payment) -> None:
    logger.info(
        "payment_recorded",
        extra={
            "tenant_id": payment.tenant_id,
            "payment_id": payment.id,
            "membership_id": payment.membership_id,
            "amount_cents": payment.amount_cents,
            "method": payment.method,
            "payment_status": payment.status,
            "recorded_by": payment.created_by,
        },
    )


def notify_payment_rejected(membership: Membership, paid_cents: int, amount_cents: int) -> None:
    """Over-balance attempts are worth a warning; they usually mean a double entry at the desk."""

    logger.warning(
        "payment_exceeds_balance",
        extra={
            "tenant_id": membership.tenant_id,
            "membership_id": membership.id,
            "price_cents": membership.price_cents,
            "paid_cents": paid_cents,
            "amount_cents": amount_cents,
        },
    )


def notify_payment_status_changed(payment: Payment, previous: Optional[str]) -> None:
    logger.info(
        "payment_status_changed",
        extra={
            "tenant_id": payment.tenant_id,
            "payment_id": payment.id,
            "membership_id": payment.membership_id,
            "old_status": previous,
            "new_status": payment.status,
        },
    )


def notify_payment_deleted(payment_id: int, tenant_id: int) -> None:
    logger.info("payment_deleted", extra={"tenant_id": tenant_id, "payment_id": payment_id})
