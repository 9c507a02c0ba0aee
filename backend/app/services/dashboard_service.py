"""Dashboard service — loads a tenant's records and runs the aggregator."""

import logging
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.property import Property
from app.models.reservation import Reservation
from app.schemas.dashboard import (
    DashboardStats,
    MonthlyRevenuePoint,
    PropertyPerformanceResponse,
    PropertySnapshot,
    ReservationSnapshot,
)
from app.services.dashboard_stats import (
    compute_stats,
    monthly_revenue_series,
    property_performance,
)

logger = logging.getLogger(__name__)


def current_time() -> datetime:
    """Return the wall-clock time in the configured timezone, without offset."""
    return datetime.now(settings.tzinfo).replace(tzinfo=None)


async def load_property_snapshots(db: AsyncSession, tenant_id: uuid.UUID) -> list[PropertySnapshot]:
    """Fetch every property of a tenant."""
    result = await db.execute(select(Property).where(Property.tenant_id == tenant_id))
    return [PropertySnapshot.model_validate(p) for p in result.scalars().all()]


async def load_reservation_snapshots(db: AsyncSession, tenant_id: uuid.UUID) -> list[ReservationSnapshot]:
    """Fetch every reservation of a tenant, timestamps normalized to the configured zone."""
    result = await db.execute(select(Reservation).where(Reservation.tenant_id == tenant_id))
    return [ReservationSnapshot.model_validate(r) for r in result.scalars().all()]


async def load_snapshots(
    db: AsyncSession,
    tenant_id: uuid.UUID,
) -> tuple[list[PropertySnapshot], list[ReservationSnapshot]]:
    """Fetch every property and reservation of a tenant as normalized snapshots."""
    properties = await load_property_snapshots(db, tenant_id)
    reservations = await load_reservation_snapshots(db, tenant_id)
    return properties, reservations


async def build_dashboard_stats(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    now: datetime,
) -> DashboardStats:
    """Load a tenant's records and compute its dashboard figures as of ``now``."""
    properties, reservations = await load_snapshots(db, tenant_id)
    stats = compute_stats(properties, reservations, now)
    logger.info(
        "Dashboard stats for tenant %s: %d properties, %d reservations, occupancy %s%%",
        tenant_id,
        stats.total_properties,
        stats.total_reservations,
        stats.occupancy_rate,
    )
    return stats


async def build_revenue_series(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    now: datetime,
    months: int,
) -> list[MonthlyRevenuePoint]:
    """Load a tenant's reservations and group confirmed revenue by month."""
    reservations = await load_reservation_snapshots(db, tenant_id)
    return monthly_revenue_series(reservations, now, months)


async def build_property_performance(db: AsyncSession, tenant_id: uuid.UUID) -> PropertyPerformanceResponse:
    """Load a tenant's records and rank its properties by revenue."""
    properties, reservations = await load_snapshots(db, tenant_id)
    return property_performance(properties, reservations)
