"""Pydantic v2 schemas for the dashboard: aggregator inputs and outputs."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from app.config import settings
from app.utils.timestamps import normalize_timestamp

# ---------------------------------------------------------------------------
# Aggregator inputs
# ---------------------------------------------------------------------------


class PropertySnapshot(BaseModel):
    """The slice of a property the dashboard needs."""

    id: uuid.UUID | str
    is_active: bool = False
    name: str = ""
    location: str | None = None
    base_price_per_night: Decimal | None = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class ReservationSnapshot(BaseModel):
    """A reservation with its timestamps normalized to the tenant timezone.

    ``check_in``/``check_out`` are ``None`` when the stored value could not be
    interpreted; such reservations never fall in a month and occupy no days.
    """

    id: uuid.UUID | str
    property_id: uuid.UUID | str | None = None
    status: str
    check_in: datetime | None = None
    check_out: datetime | None = None
    total_price: Decimal = Decimal("0")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value: Any) -> datetime | None:
        return normalize_timestamp(value, settings.tzinfo)

    @field_validator("total_price", mode="before")
    @classmethod
    def _default_price(cls, value: Any) -> Any:
        return Decimal("0") if value is None else value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DashboardStats(BaseModel):
    """Headline figures for a tenant's dashboard at a given instant.

    Percentages are rounded to two decimal places. ``occupancy_rate`` is not
    capped, so overlapping or long stays can push it above 100.
    """

    as_of: datetime
    total_properties: int
    active_properties: int
    total_reservations: int
    pending_reservations: int
    total_revenue: Decimal
    monthly_revenue: Decimal
    last_month_revenue: Decimal
    monthly_reservations: int
    last_month_reservations: int
    occupied_days: int
    total_days: int
    occupancy_rate: Decimal
    revenue_trend: Decimal
    reservations_trend: Decimal


class MonthlyRevenuePoint(BaseModel):
    """Confirmed revenue for one calendar month."""

    month: str  # YYYY-MM
    revenue: Decimal
    reservations: int
    average_ticket: Decimal  # revenue per reservation, 0 for an empty month
    growth: Decimal  # percentage change vs the preceding month


class MonthlyRevenueResponse(BaseModel):
    """Monthly revenue series, oldest month first."""

    items: list[MonthlyRevenuePoint]


class PropertyPerformance(BaseModel):
    """Lifetime figures for one property over its non-cancelled reservations."""

    id: uuid.UUID | str
    name: str
    location: str | None = None
    is_active: bool
    revenue: Decimal
    reservations: int
    occupied_days: int
    occupancy_rate: Decimal  # capped at 100
    average_nightly: Decimal | None = None


class PropertyPerformanceSummary(BaseModel):
    total_properties: int
    active_properties: int
    average_occupancy: Decimal
    top_performer: PropertyPerformance | None = None


class PropertyPerformanceResponse(BaseModel):
    """Per-property performance, highest revenue first."""

    properties: list[PropertyPerformance]
    summary: PropertyPerformanceSummary
