from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from gymdesk.services.money import MAX_AMOUNT, MAX_CENTS, amount_matches_cents, amount_to_cents, cents_to_amount


def _ensure_price_pair(price: Optional[Decimal], price_cents: Optional[int]) -> None:
    if price is not None and price_cents is not None and not amount_matches_cents(price, price_cents):
        raise ValueError("price and price_cents disagree")


class PlanBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    duration_days: int = Field(..., gt=0)
    visit_limit: Optional[int] = Field(None, gt=0)
    active: bool = True


class PlanCreate(PlanBase):
    price_cents: Optional[int] = Field(None, ge=0, le=MAX_CENTS)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT, decimal_places=2)

    @model_validator(mode="after")
    def _resolve_price(self) -> "PlanCreate":
        _ensure_price_pair(self.price, self.price_cents)
        if self.price_cents is None:
            if self.price is None:
                raise ValueError("price or price_cents is required")
            self.price_cents = amount_to_cents(self.price)
        return self


class PlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=120)
    duration_days: Optional[int] = Field(None, gt=0)
    visit_limit: Optional[int] = Field(None, gt=0)
    active: Optional[bool] = None
    price_cents: Optional[int] = Field(None, ge=0, le=MAX_CENTS)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT, decimal_places=2)

    @model_validator(mode="after")
    def _check_price_pair(self) -> "PlanUpdate":
        _ensure_price_pair(self.price, self.price_cents)
        return self


class PlanOut(PlanBase):
    id: int
    price_cents: int
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[misc]
    @property
    def price(self) -> Decimal:
        return cents_to_amount(self.price_cents)

    class Config:
        from_attributes = True
