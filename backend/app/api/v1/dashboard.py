"""Dashboard API router — headline statistics and monthly revenue."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_tenant, get_db
from app.config import settings
from app.schemas.auth import TenantContext
from app.schemas.dashboard import (
    DashboardStats,
    MonthlyRevenueResponse,
    PropertyPerformanceResponse,
)
from app.services.dashboard_service import (
    build_dashboard_stats,
    build_property_performance,
    build_revenue_series,
    current_time,
)
from app.utils.timestamps import normalize_timestamp

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


def _resolve_now(as_of: datetime | None) -> datetime:
    """Use the caller's reference instant if given, otherwise the clock."""
    if as_of is None:
        return current_time()
    return normalize_timestamp(as_of, settings.tzinfo)


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Headline dashboard statistics for the current tenant",
)
async def get_dashboard_stats(
    as_of: datetime | None = Query(None, description="Reference instant; defaults to now"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> DashboardStats:
    """Compute counts, revenue, trends and occupancy from the tenant's records.

    Months are calendar months in the configured timezone. Trends compare the
    month of ``as_of`` with the month before it.
    """
    return await build_dashboard_stats(db, tenant.tenant_id, _resolve_now(as_of))


@router.get(
    "/revenue-by-month",
    response_model=MonthlyRevenueResponse,
    summary="Confirmed revenue grouped by check-in month",
)
async def get_revenue_by_month(
    months: int = Query(6, ge=1, le=24, description="Number of months, ending with the current one"),
    as_of: datetime | None = Query(None, description="Reference instant; defaults to now"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> MonthlyRevenueResponse:
    """Return the tenant's monthly revenue series, oldest month first."""
    items = await build_revenue_series(db, tenant.tenant_id, _resolve_now(as_of), months)
    return MonthlyRevenueResponse(items=items)


@router.get(
    "/properties",
    response_model=PropertyPerformanceResponse,
    summary="Revenue and occupancy per property",
)
async def get_property_performance(
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> PropertyPerformanceResponse:
    """Return each property's revenue, reservation count and occupancy over all
    non-cancelled reservations, highest revenue first, with a portfolio summary."""
    return await build_property_performance(db, tenant.tenant_id)
