from __future__ import annotations

from fastapi import APIRouter, Depends

from gymdesk.auth.deps import require_roles
from gymdesk.core.config import settings
from gymdesk.models.role import ADMIN_ROLE, STAFF_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.dashboard import DashboardSummary, RevenueOut
from gymdesk.services import dashboard as dashboard_service
from gymdesk.services.store import GymStore, get_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

VIEW_ROLES = (STAFF_ROLE, ADMIN_ROLE)


@router.get("/summary", response_model=DashboardSummary)
def get_summary(
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*VIEW_ROLES)),
) -> DashboardSummary:
    return dashboard_service.get_dashboard_summary(store, current_user.tenant_id)


@router.get("/revenue", response_model=RevenueOut)
def get_revenue(
    store: GymStore = Depends(get_store),
    current_user: User = Depends(require_roles(*VIEW_ROLES)),
) -> RevenueOut:
    tenant = store.find_tenant(current_user.tenant_id)
    return RevenueOut(
        total_revenue=dashboard_service.get_total_revenue(store, current_user.tenant_id),
        currency=tenant.currency if tenant else settings.DEFAULT_CURRENCY,
    )
