from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any, Optional

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from gymdesk.core.db import get_db
from gymdesk.models.member import Member
from gymdesk.models.membership import Membership
from gymdesk.models.payment import Payment
from gymdesk.models.plan import Plan
from gymdesk.models.role import Role
from gymdesk.models.tenant import Tenant
from gymdesk.models.user import User
from gymdesk.services.membership import COUNTED_STATUSES, OPEN_STATUSES


class GymStore:
    """Tenant-scoped persistence operations over one SQLAlchemy session.

    Every lookup takes the caller's ``tenant_id``; rows owned by another
    tenant are indistinguishable from missing rows. Money is always integer
    cents here. Writes only flush; ``transaction()`` decides when to commit.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["GymStore"]:
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # Tenants and users

    def find_tenant(self, tenant_id: int) -> Optional[Tenant]:
        return self.db.get(Tenant, tenant_id)

    def find_tenant_by_code(self, code: str) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.code == code).first()

    def insert_tenant(self, **values: Any) -> Tenant:
        tenant = Tenant(**values)
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def find_user(self, user_id: int, tenant_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id, User.tenant_id == tenant_id).first()

    def find_user_by_email(self, email: str, tenant_id: int) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.tenant_id == tenant_id, func.lower(User.email) == email.lower())
            .first()
        )

    def insert_user(self, *, roles: Iterable[Role] = (), **values: Any) -> User:
        user = User(**values)
        user.roles = list(roles)
        self.db.add(user)
        self.db.flush()
        return user

    def find_roles(self, names: Iterable[str]) -> list[Role]:
        names = list(names)
        if not names:
            return []
        return self.db.query(Role).filter(Role.name.in_(names)).all()

    def ensure_role(self, name: str, description: Optional[str] = None) -> Role:
        role = self.db.query(Role).filter(Role.name == name).first()
        if role is None:
            role = Role(name=name, description=description)
            self.db.add(role)
            self.db.flush()
        return role

    # Members

    def find_member(self, member_id: int, tenant_id: int) -> Optional[Member]:
        return self.db.query(Member).filter(Member.id == member_id, Member.tenant_id == tenant_id).first()

    def lock_member(self, member_id: int, tenant_id: int) -> Optional[Member]:
        return (
            self.db.query(Member)
            .filter(Member.id == member_id, Member.tenant_id == tenant_id)
            .with_for_update()
            .first()
        )

    def find_members(self, tenant_id: int) -> list[Member]:
        return (
            self.db.query(Member)
            .filter(Member.tenant_id == tenant_id)
            .order_by(Member.created_at.desc(), Member.id.desc())
            .all()
        )

    def insert_member(self, **values: Any) -> Member:
        member = Member(**values)
        self.db.add(member)
        self.db.flush()
        return member

    def update_member(self, member_id: int, tenant_id: int, values: dict[str, Any]) -> int:
        if not values:
            return 1 if self.find_member(member_id, tenant_id) else 0
        updated = (
            self.db.query(Member)
            .filter(Member.id == member_id, Member.tenant_id == tenant_id)
            .update(values, synchronize_session=False)
        )
        self.db.expire_all()
        return updated

    def delete_member(self, member_id: int, tenant_id: int) -> int:
        membership_ids = self.db.query(Membership.id).filter(
            Membership.member_id == member_id, Membership.tenant_id == tenant_id
        )
        self.db.query(Payment).filter(
            Payment.tenant_id == tenant_id, Payment.membership_id.in_(membership_ids.scalar_subquery())
        ).delete(synchronize_session=False)
        self.db.query(Membership).filter(
            Membership.member_id == member_id, Membership.tenant_id == tenant_id
        ).delete(synchronize_session=False)
        deleted = (
            self.db.query(Member)
            .filter(Member.id == member_id, Member.tenant_id == tenant_id)
            .delete(synchronize_session=False)
        )
        self.db.expire_all()
        return deleted

    def count_members(self, tenant_id: int) -> int:
        return self.db.query(func.count(Member.id)).filter(Member.tenant_id == tenant_id).scalar() or 0

    # Plans

    def find_plan(self, plan_id: int, tenant_id: int) -> Optional[Plan]:
        return self.db.query(Plan).filter(Plan.id == plan_id, Plan.tenant_id == tenant_id).first()

    def find_plans(self, tenant_id: int, *, active_only: bool = False) -> list[Plan]:
        query = self.db.query(Plan).filter(Plan.tenant_id == tenant_id)
        if active_only:
            query = query.filter(Plan.active.is_(True))
        return query.order_by(Plan.name.asc(), Plan.id.asc()).all()

    def insert_plan(self, **values: Any) -> Plan:
        plan = Plan(**values)
        self.db.add(plan)
        self.db.flush()
        return plan

    def update_plan(self, plan_id: int, tenant_id: int, values: dict[str, Any]) -> int:
        if not values:
            return 1 if self.find_plan(plan_id, tenant_id) else 0
        updated = (
            self.db.query(Plan)
            .filter(Plan.id == plan_id, Plan.tenant_id == tenant_id)
            .update(values, synchronize_session=False)
        )
        self.db.expire_all()
        return updated

    def delete_plan(self, plan_id: int, tenant_id: int) -> int:
        self.db.query(Membership).filter(
            Membership.plan_id == plan_id, Membership.tenant_id == tenant_id
        ).update({"plan_id": None}, synchronize_session=False)
        deleted = (
            self.db.query(Plan)
            .filter(Plan.id == plan_id, Plan.tenant_id == tenant_id)
            .delete(synchronize_session=False)
        )
        self.db.expire_all()
        return deleted

    # Memberships

    def _membership_query(self, tenant_id: int) -> Query:
        return (
            self.db.query(Membership)
            .options(joinedload(Membership.member), joinedload(Membership.plan))
            .filter(Membership.tenant_id == tenant_id)
        )

    def find_active_or_pending_memberships(self, member_id: int, tenant_id: int) -> list[Membership]:
        return (
            self.db.query(Membership)
            .filter(
                Membership.member_id == member_id,
                Membership.tenant_id == tenant_id,
                Membership.status.in_(OPEN_STATUSES),
            )
            .all()
        )

    def insert_membership(self, **values: Any) -> Membership:
        membership = Membership(**values)
        self.db.add(membership)
        self.db.flush()
        return membership

    def find_membership_by_id(self, membership_id: int, tenant_id: int) -> Optional[Membership]:
        return self._membership_query(tenant_id).filter(Membership.id == membership_id).first()

    def lock_membership(self, membership_id: int, tenant_id: int) -> Optional[Membership]:
        return (
            self.db.query(Membership)
            .filter(Membership.id == membership_id, Membership.tenant_id == tenant_id)
            .with_for_update()
            .first()
        )

    def find_memberships_by_tenant(self, tenant_id: int) -> list[Membership]:
        return (
            self._membership_query(tenant_id)
            .order_by(Membership.created_at.desc(), Membership.id.desc())
            .all()
        )

    def find_memberships_by_member(self, member_id: int, tenant_id: int) -> list[Membership]:
        return (
            self._membership_query(tenant_id)
            .filter(Membership.member_id == member_id)
            .order_by(Membership.created_at.desc(), Membership.id.desc())
            .all()
        )

    def update_membership(self, membership_id: int, tenant_id: int, values: dict[str, Any]) -> int:
        if not values:
            return 1 if self.find_membership_by_id(membership_id, tenant_id) else 0
        updated = (
            self.db.query(Membership)
            .filter(Membership.id == membership_id, Membership.tenant_id == tenant_id)
            .update(values, synchronize_session=False)
        )
        self.db.expire_all()
        return updated

    def delete_membership(self, membership_id: int, tenant_id: int) -> int:
        self.db.query(Payment).filter(
            Payment.membership_id == membership_id, Payment.tenant_id == tenant_id
        ).delete(synchronize_session=False)
        deleted = (
            self.db.query(Membership)
            .filter(Membership.id == membership_id, Membership.tenant_id == tenant_id)
            .delete(synchronize_session=False)
        )
        self.db.expire_all()
        return deleted

    def latest_membership_end_dates(self, tenant_id: int) -> dict[int, date]:
        """Latest end date per member among memberships that count toward the dashboard."""
        rows = (
            self.db.query(Membership.member_id, func.max(Membership.end_date))
            .filter(Membership.tenant_id == tenant_id, Membership.status.in_(COUNTED_STATUSES))
            .group_by(Membership.member_id)
            .all()
        )
        return {member_id: end_date for member_id, end_date in rows if end_date is not None}

    # Payments

    def _payment_query(self, tenant_id: int) -> Query:
        return (
            self.db.query(Payment)
            .options(
                selectinload(Payment.membership).selectinload(Membership.member),
                selectinload(Payment.creator),
            )
            .filter(Payment.tenant_id == tenant_id)
        )

    def find_payment_by_id(self, payment_id: int, tenant_id: int) -> Optional[Payment]:
        return self._payment_query(tenant_id).filter(Payment.id == payment_id).first()

    def find_payments_by_tenant(self, tenant_id: int) -> list[Payment]:
        return self._payment_query(tenant_id).order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    def find_payments_by_membership(self, membership_id: int, tenant_id: int) -> list[Payment]:
        return (
            self._payment_query(tenant_id)
            .filter(Payment.membership_id == membership_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    def insert_payment(self, **values: Any) -> Payment:
        payment = Payment(**values)
        self.db.add(payment)
        self.db.flush()
        return payment

    def update_payment_status(self, payment_id: int, tenant_id: int, status: str) -> int:
        updated = (
            self.db.query(Payment)
            .filter(Payment.id == payment_id, Payment.tenant_id == tenant_id)
            .update({"status": status}, synchronize_session=False)
        )
        self.db.expire_all()
        return updated

    def delete_payment(self, payment_id: int, tenant_id: int) -> int:
        deleted = (
            self.db.query(Payment)
            .filter(Payment.id == payment_id, Payment.tenant_id == tenant_id)
            .delete(synchronize_session=False)
        )
        self.db.expire_all()
        return deleted

    def paid_cents_for_membership(
        self,
        membership_id: int,
        tenant_id: int,
        *,
        exclude_payment_id: Optional[int] = None,
    ) -> int:
        query = self.db.query(func.coalesce(func.sum(Payment.amount_cents), 0)).filter(
            Payment.membership_id == membership_id,
            Payment.tenant_id == tenant_id,
            Payment.status == "PAID",
        )
        if exclude_payment_id is not None:
            query = query.filter(Payment.id != exclude_payment_id)
        return int(query.scalar() or 0)

    def paid_cents_by_membership(
        self,
        tenant_id: int,
        membership_ids: Optional[Iterable[int]] = None,
    ) -> dict[int, int]:
        query = (
            self.db.query(Payment.membership_id, func.sum(Payment.amount_cents))
            .filter(Payment.tenant_id == tenant_id, Payment.status == "PAID")
            .group_by(Payment.membership_id)
        )
        if membership_ids is not None:
            ids = list(membership_ids)
            if not ids:
                return {}
            query = query.filter(Payment.membership_id.in_(ids))
        return {membership_id: int(total or 0) for membership_id, total in query.all()}

    def total_paid_cents(self, tenant_id: int) -> int:
        total = (
            self.db.query(func.coalesce(func.sum(Payment.amount_cents), 0))
            .filter(Payment.tenant_id == tenant_id, Payment.status == "PAID")
            .scalar()
        )
        return int(total or 0)

    def price_cents_by_member(self, tenant_id: int) -> dict[int, int]:
        rows = (
            self.db.query(Membership.member_id, func.sum(Membership.price_cents))
            .filter(Membership.tenant_id == tenant_id)
            .group_by(Membership.member_id)
            .all()
        )
        return {member_id: int(total or 0) for member_id, total in rows}

    def paid_cents_by_member(self, tenant_id: int) -> dict[int, int]:
        rows = (
            self.db.query(Membership.member_id, func.sum(Payment.amount_cents))
            .join(Payment, Payment.membership_id == Membership.id)
            .filter(
                Membership.tenant_id == tenant_id,
                Payment.tenant_id == tenant_id,
                Payment.status == "PAID",
            )
            .group_by(Membership.member_id)
            .all()
        )
        return {member_id: int(total or 0) for member_id, total in rows}


def get_store(db: Session = Depends(get_db)) -> GymStore:
    return GymStore(db)
