from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Literal, Optional, Union

from gymdesk.core.config import settings
from gymdesk.core.errors import InvalidStatusTransition

DisplayStatus = Literal["ACTIVE", "EXPIRING_SOON", "EXPIRED"]

OPEN_STATUSES: tuple[str, ...] = ("ACTIVE", "PENDING")
# Memberships that count toward dashboard buckets.
COUNTED_STATUSES: tuple[str, ...] = ("ACTIVE", "EXPIRED")

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "PENDING": frozenset({"ACTIVE"}),
    "ACTIVE": frozenset({"EXPIRED", "CANCELLED"}),
    "EXPIRED": frozenset(),
    "CANCELLED": frozenset(),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def derive_membership_status(
    end_date: Union[date, datetime],
    now: Optional[datetime] = None,
    *,
    expiring_days: Optional[int] = None,
) -> DisplayStatus:
    """Classify a membership by how far its end date is from ``now``.

    A membership whose end falls exactly on ``now`` is already EXPIRED; the
    expiring window is inclusive of its last instant.
    """
    current = _ensure_datetime(now) if now is not None else _now()
    window = settings.EXPIRING_SOON_DAYS if expiring_days is None else expiring_days
    ends_at = _ensure_datetime(end_date)
    if ends_at <= current:
        return "EXPIRED"
    if ends_at <= current + timedelta(days=window):
        return "EXPIRING_SOON"
    return "ACTIVE"


def compute_end_date(start_date: date, duration_days: Optional[int] = None) -> date:
    days = duration_days if duration_days is not None else settings.DEFAULT_MEMBERSHIP_DAYS
    return start_date + timedelta(days=days)


def ensure_transition(current: str, target: str) -> None:
    if current == target:
        return
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidStatusTransition(f"Cannot change membership status from {current} to {target}")
