from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from gymdesk.auth.security import hash_password
from gymdesk.models.role import Role
from gymdesk.models.user import User
from gymdesk.services.store import GymStore


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def validate_password_strength(password: str) -> None:
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long.")
    if not any(ch.isalpha() for ch in password) or not any(ch.isdigit() for ch in password):
        raise ValueError("Password must contain both letters and numbers.")


def load_roles(store: GymStore, names: Iterable[str]) -> list[Role]:
    wanted = sorted(set(names))
    roles = store.find_roles(wanted)
    missing = set(wanted) - {role.name for role in roles}
    if missing:
        raise ValueError(f"Unknown roles: {', '.join(sorted(missing))}")
    return roles


def create_user(
    store: GymStore,
    *,
    tenant_id: int,
    full_name: str,
    email: str,
    password: str,
    roles: Iterable[str],
    phone: str | None = None,
) -> User:
    """Create a user inside ``tenant_id``; raises ValueError for duplicate emails or bad input."""
    validate_password_strength(password)
    with store.transaction():
        if store.find_user_by_email(email, tenant_id) is not None:
            raise ValueError("A user with this email already exists")
        user = store.insert_user(
            tenant_id=tenant_id,
            full_name=full_name,
            email=email.lower(),
            phone=phone,
            hashed_password=hash_password(password),
            roles=load_roles(store, roles),
        )
    return user
