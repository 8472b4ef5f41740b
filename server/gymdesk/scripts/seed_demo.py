from __future__ import annotations

import argparse
import logging
from datetime import date

import gymdesk.models  # noqa: F401
from gymdesk.core.config import settings
from gymdesk.core.db import Base, Database
from gymdesk.core.logging_config import setup_logging
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.schemas.member import MemberCreate
from gymdesk.schemas.membership import MembershipCreate
from gymdesk.schemas.payment import PaymentCreate
from gymdesk.schemas.plan import PlanCreate
from gymdesk.services import members as members_service
from gymdesk.services import memberships as memberships_service
from gymdesk.services import payments as payments_service
from gymdesk.services import plans as plans_service
from gymdesk.services.store import GymStore
from gymdesk.services.user_accounts import create_user

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    ADMIN_ROLE: "Full access including deletes and user registration",
    STAFF_ROLE: "Front desk: members, memberships and payments",
}

DEMO_PLANS = [
    ("Monthly", 30, 50000),
    ("Quarterly", 90, 135000),
    ("Annual", 365, 480000),
]

DEMO_MEMBERS = ["Omar Hassan", "Mona Adel", "Karim Fathy"]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a demo gym with roles, an admin and sample data.")
    parser.add_argument("--tenant-code", default="demo", help="Unique code of the gym to create or reuse")
    parser.add_argument("--tenant-name", default="Demo Gym", help="Display name of the gym")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="Demo1234")
    parser.add_argument("--admin-name", default="Gym Admin")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create tables directly instead of relying on alembic (local SQLite runs)",
    )
    parser.add_argument("--with-sample-data", action="store_true", help="Add plans, members and payments")
    return parser.parse_args()


def seed_sample_data(store: GymStore, tenant_id: int, created_by: int) -> None:
    plans = [
        plans_service.create_plan(
            store,
            PlanCreate(name=name, duration_days=days, price_cents=price_cents),
            tenant_id=tenant_id,
        )
        for name, days, price_cents in DEMO_PLANS
    ]
    for index, full_name in enumerate(DEMO_MEMBERS):
        member = members_service.create_member(store, MemberCreate(full_name=full_name), tenant_id=tenant_id)
        plan = plans[index % len(plans)]
        membership = memberships_service.create_membership(
            store,
            MembershipCreate(member_id=member.id, plan_id=plan.id, start_date=date.today()),
            tenant_id=tenant_id,
            created_by=created_by,
        )
        payments_service.record_payment(
            store,
            PaymentCreate(membership_id=membership.id, amount_cents=plan.price_cents // 2),
            tenant_id=tenant_id,
            created_by=created_by,
        )


def main() -> None:
    args = parse_args()
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL).init()
    if args.create_schema:
        Base.metadata.create_all(bind=database.engine)

    session = database.session()
    try:
        store = GymStore(session)
        with store.transaction():
            for name, description in ROLE_DESCRIPTIONS.items():
                store.ensure_role(name, description)
            tenant = store.find_tenant_by_code(args.tenant_code)
            if tenant is None:
                tenant = store.insert_tenant(
                    name=args.tenant_name,
                    code=args.tenant_code,
                    currency=settings.DEFAULT_CURRENCY,
                )
        logger.info("tenant_ready", extra={"tenant_id": tenant.id, "tenant_code": tenant.code})

        admin = store.find_user_by_email(args.admin_email, tenant.id)
        if admin is None:
            admin = create_user(
                store,
                tenant_id=tenant.id,
                full_name=args.admin_name,
                email=args.admin_email,
                password=args.admin_password,
                roles=[ADMIN_ROLE, STAFF_ROLE],
            )
            logger.info("admin_created", extra={"tenant_id": tenant.id, "user_id": admin.id})

        if args.with_sample_data:
            seed_sample_data(store, tenant.id, admin.id)
    finally:
        session.close()
        database.teardown()

    print(f"Tenant {tenant.code} (id={tenant.id}) ready; admin login: {args.admin_email}")


if __name__ == "__main__":
    main()
