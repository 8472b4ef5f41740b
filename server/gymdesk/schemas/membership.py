from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from gymdesk.schemas.payment import PaymentOut
from gymdesk.services.membership import DisplayStatus, derive_membership_status
from gymdesk.services.money import MAX_AMOUNT, MAX_CENTS, amount_matches_cents, cents_to_amount

MembershipStatus = Literal["PENDING", "ACTIVE", "EXPIRED", "CANCELLED"]


def _ensure_price_pair(price: Optional[Decimal], price_cents: Optional[int]) -> None:
    if price is not None and price_cents is not None and not amount_matches_cents(price, price_cents):
        raise ValueError("price and price_cents disagree")


class MembershipCreate(BaseModel):
    member_id: int
    plan_id: Optional[int] = None
    start_date: date
    price_cents: Optional[int] = Field(None, ge=0, le=MAX_CENTS)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    status: MembershipStatus = "ACTIVE"
    notes: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def _check_price_pair(self) -> "MembershipCreate":
        _ensure_price_pair(self.price, self.price_cents)
        return self


class MembershipUpdate(BaseModel):
    plan_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    price_cents: Optional[int] = Field(None, ge=0, le=MAX_CENTS)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    status: Optional[MembershipStatus] = None
    notes: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def _check_price_pair(self) -> "MembershipUpdate":
        _ensure_price_pair(self.price, self.price_cents)
        return self


class MembershipOut(BaseModel):
    id: int
    member_id: int
    plan_id: Optional[int] = None
    start_date: date
    end_date: date
    price_cents: int
    status: MembershipStatus
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[misc]
    @property
    def price(self) -> Decimal:
        return cents_to_amount(self.price_cents)

    @computed_field  # type: ignore[misc]
    @property
    def display_status(self) -> DisplayStatus:
        return derive_membership_status(self.end_date)

    class Config:
        from_attributes = True


class MembershipBalanceOut(MembershipOut):
    payments: List[PaymentOut] = Field(default_factory=list)
    paid: Decimal
    remaining: Decimal
