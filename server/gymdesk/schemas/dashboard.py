from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel

from gymdesk.schemas.member import MemberOut
from gymdesk.schemas.membership import MembershipBalanceOut


class MemberStats(BaseModel):
    total_paid: Decimal
    total_remaining: Decimal


class MemberDetailsOut(BaseModel):
    member: MemberOut
    memberships: List[MembershipBalanceOut]
    stats: MemberStats


class DashboardSummary(BaseModel):
    total_members: int
    active_members: int
    expiring_soon_members: int
    expired_members: int
    total_revenue: Decimal


class RevenueOut(BaseModel):
    total_revenue: Decimal
    currency: str
