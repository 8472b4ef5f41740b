from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from gymdesk.auth.deps import require_roles
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.payment import PaymentCreate, PaymentOut, PaymentStatusUpdate
from gymdesk.services import payments as payments_service
from gymdesk.services.store import GymStore, get_store

router = APIRouter(prefix="/payments", tags=["payments"])

DESK_ROLES = (STAFF_ROLE, ADMIN_ROLE)
DELETE_ROLES = (ADMIN_ROLE,)


@router.get("", response_model=list[PaymentOut], status_code=status.HTTP_200_OK)
def list_payments(
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> list[PaymentOut]:
    return [PaymentOut.model_validate(item) for item in payments_service.list_payments(store, current_user.tenant_id)]


@router.post("", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: PaymentCreate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> PaymentOut:
    payment = payments_service.record_payment(
        store, payload, tenant_id=current_user.tenant_id, created_by=current_user.id
    )
    return PaymentOut.model_validate(payment)


@router.get("/membership/{membership_id}", response_model=list[PaymentOut])
def list_membership_payments(
    membership_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> list[PaymentOut]:
    payments = payments_service.list_membership_payments(store, membership_id, current_user.tenant_id)
    return [PaymentOut.model_validate(item) for item in payments]


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(
    payment_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> PaymentOut:
    return PaymentOut.model_validate(payments_service.get_payment(store, payment_id, current_user.tenant_id))


@router.post("/{payment_id}/status", response_model=PaymentOut)
def update_payment_status(
    payment_id: int,
    payload: PaymentStatusUpdate,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DESK_ROLES)),
) -> PaymentOut:
    payment = payments_service.update_payment_status(store, payment_id, current_user.tenant_id, payload.status)
    return PaymentOut.model_validate(payment)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(
    payment_id: int,
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*DELETE_ROLES)),
) -> None:
    if not payments_service.delete_payment(store, payment_id, current_user.tenant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
