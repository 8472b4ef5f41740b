from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

MemberStatus = Literal["ACTIVE", "EXPIRED", "SUSPENDED"]


class MemberBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=32)
    dob: Optional[date] = None
    emergency_contact: Optional[str] = Field(None, max_length=120)
    medical_notes: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=255)


class MemberCreate(MemberBase):
    status: MemberStatus = "ACTIVE"


class MemberUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=32)
    dob: Optional[date] = None
    emergency_contact: Optional[str] = Field(None, max_length=120)
    medical_notes: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=255)
    status: Optional[MemberStatus] = None


class MemberOut(MemberBase):
    id: int
    email: Optional[str] = None
    status: MemberStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MemberListItem(MemberOut):
    remaining_amount: Decimal = Decimal("0.00")
