from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from gymdesk.core.db import Base

MEMBER_STATUSES = ("ACTIVE", "EXPIRED", "SUSPENDED")
MemberStatus = Enum(*MEMBER_STATUSES, name="member_status")


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(191), nullable=True)
    phone = Column(String(32), nullable=True)
    dob = Column(Date, nullable=True)
    emergency_contact = Column(String(120), nullable=True)
    medical_notes = Column(String(255), nullable=True)
    photo_url = Column(String(255), nullable=True)
    # Administrative flag only; membership health is derived from memberships.
    status = Column(MemberStatus, nullable=False, default="ACTIVE")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    memberships = relationship(
        "Membership",
        back_populates="member",
        order_by="Membership.created_at.desc(), Membership.id.desc()",
        passive_deletes=True,
    )
