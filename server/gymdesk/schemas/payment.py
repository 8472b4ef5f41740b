from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from gymdesk.services.money import MAX_AMOUNT, MAX_CENTS, amount_matches_cents, cents_to_amount

PaymentStatus = Literal["PAID", "VOID"]
PaymentMethod = Literal["CASH", "CARD", "BANK_TRANSFER"]


class PaymentCreate(BaseModel):
    membership_id: int
    amount_cents: Optional[int] = Field(None, gt=0, le=MAX_CENTS)
    amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT)
    method: PaymentMethod = "CASH"
    status: PaymentStatus = "PAID"
    notes: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def _require_amount(self) -> "PaymentCreate":
        if self.amount_cents is None and self.amount is None:
            raise ValueError("amount or amount_cents is required")
        if (
            self.amount is not None
            and self.amount_cents is not None
            and not amount_matches_cents(self.amount, self.amount_cents)
        ):
            raise ValueError("amount and amount_cents disagree")
        return self


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus


class PaymentOut(BaseModel):
    id: int
    membership_id: int
    amount_cents: int
    method: PaymentMethod
    status: PaymentStatus
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    member_name: Optional[str] = None
    created_by_name: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def amount(self) -> Decimal:
        return cents_to_amount(self.amount_cents)

    class Config:
        from_attributes = True
