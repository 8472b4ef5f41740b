from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from gymdesk.core.db import Base

PAYMENT_STATUSES = ("PAID", "VOID")
PAYMENT_METHODS = ("CASH", "CARD", "BANK_TRANSFER")
PaymentStatus = Enum(*PAYMENT_STATUSES, name="payment_status")
PaymentMethod = Enum(*PAYMENT_METHODS, name="payment_method")


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (CheckConstraint("amount_cents > 0", name="ck_payments_amount_positive"),)

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    membership_id = Column(Integer, ForeignKey("memberships.id", ondelete="CASCADE"), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    method = Column(PaymentMethod, nullable=False, default="CASH")
    status = Column(PaymentStatus, nullable=False, default="PAID")
    notes = Column(String(255), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    membership = relationship("Membership", back_populates="payments")
    creator = relationship("User")

    @property
    def member_name(self) -> str | None:
        if self.membership is None or self.membership.member is None:
            return None
        return self.membership.member.full_name

    @property
    def created_by_name(self) -> str | None:
        return self.creator.full_name if self.creator else None
