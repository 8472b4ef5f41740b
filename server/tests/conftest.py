from __future__ import annotations

import os
from collections.abc import Generator
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gymdesk.auth.deps import get_current_user
from gymdesk.core.db import Base, get_db
from gymdesk.main import app
from gymdesk.models.member import Member
from gymdesk.models.plan import Plan
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE, Role
from gymdesk.models.tenant import Tenant
from gymdesk.models.user import User
from gymdesk.services.store import GymStore

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def store(db_session: Session) -> GymStore:
    return GymStore(db_session)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(user: User):
        app.dependency_overrides[get_current_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_current_user, None)


def _ensure_role(session: Session, name: str) -> Role:
    role = session.query(Role).filter_by(name=name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.commit()
        session.refresh(role)
    return role


def _create_tenant(session: Session, code: str, name: str) -> Tenant:
    tenant = Tenant(name=name, code=code)
    session.add(tenant)
    session.commit()
    session.refresh(tenant)
    return tenant


def _create_user(session: Session, tenant: Tenant, email: str, full_name: str, roles: list[str]) -> User:
    user = User(
        tenant_id=tenant.id,
        email=email,
        full_name=full_name,
        hashed_password="hash",
        is_active=True,
    )
    for name in roles:
        user.roles.append(_ensure_role(session, name))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def tenant(db_session: Session) -> Tenant:
    return _create_tenant(db_session, "cairo-fit", "Cairo Fit")


@pytest.fixture()
def other_tenant(db_session: Session) -> Tenant:
    return _create_tenant(db_session, "alex-gym", "Alex Gym")


@pytest.fixture()
def admin_user(db_session: Session, tenant: Tenant) -> User:
    return _create_user(db_session, tenant, "admin@example.com", "Gym Admin", [ADMIN_ROLE])


@pytest.fixture()
def staff_user(db_session: Session, tenant: Tenant) -> User:
    return _create_user(db_session, tenant, "desk@example.com", "Front Desk", [STAFF_ROLE])


@pytest.fixture()
def other_admin(db_session: Session, other_tenant: Tenant) -> User:
    return _create_user(db_session, other_tenant, "admin@alex.example.com", "Alex Admin", [ADMIN_ROLE])


@pytest.fixture()
def sample_member(db_session: Session, tenant: Tenant) -> Member:
    member = Member(
        tenant_id=tenant.id,
        full_name="Omar Hassan",
        email="omar@example.com",
        phone="+20 100 000 0000",
        dob=date(1994, 5, 17),
        status="ACTIVE",
    )
    db_session.add(member)
    db_session.commit()
    db_session.refresh(member)
    return member


@pytest.fixture()
def monthly_plan(db_session: Session, tenant: Tenant) -> Plan:
    plan = Plan(tenant_id=tenant.id, name="Monthly", duration_days=30, price_cents=10000, active=True)
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan
