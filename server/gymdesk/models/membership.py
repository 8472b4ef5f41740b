from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from gymdesk.core.db import Base

MEMBERSHIP_STATUSES = ("PENDING", "ACTIVE", "EXPIRED", "CANCELLED")
MembershipStatus = Enum(*MEMBERSHIP_STATUSES, name="membership_status")


class Membership(Base):
    __tablename__ = "memberships"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_memberships_dates"),
        Index(
            "uq_memberships_open_per_member",
            "tenant_id",
            "member_id",
            unique=True,
            postgresql_where=text("status IN ('ACTIVE', 'PENDING')"),
            sqlite_where=text("status IN ('ACTIVE', 'PENDING')"),
        ),
    )

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="SET NULL"), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False, index=True)
    price_cents = Column(Integer, nullable=False)
    # Stored lifecycle state; the display status is computed from end_date.
    status = Column(MembershipStatus, nullable=False, default="ACTIVE", index=True)
    notes = Column(String(255), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    member = relationship("Member", back_populates="memberships")
    plan = relationship("Plan")
    creator = relationship("User")
    payments = relationship(
        "Payment",
        back_populates="membership",
        order_by="Payment.created_at.desc(), Payment.id.desc()",
        passive_deletes=True,
    )
