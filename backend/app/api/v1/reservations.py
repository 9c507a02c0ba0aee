"""Reservations CRUD API router.

Tenant rule: every query filters on ``Reservation.tenant_id`` and a
reservation may only point at a property of the same tenant.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_tenant, get_db
from app.api.v1.properties import get_tenant_property
from app.models.reservation import Reservation
from app.schemas.auth import MessageResponse, TenantContext
from app.schemas.reservation import (
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
    ReservationUpdate,
)

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])

# Columns that keep their stored value when an update sends null
_NON_NULLABLE_FIELDS = ("property_id", "guest_name", "num_guests", "check_in", "check_out", "status")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _get_tenant_reservation(
    reservation_id: uuid.UUID,
    tenant: TenantContext,
    db: AsyncSession,
) -> Reservation:
    """Fetch a reservation of the current tenant or raise ``HTTPException 404``."""
    result = await db.execute(
        select(Reservation).where(
            Reservation.id == reservation_id,
            Reservation.tenant_id == tenant.tenant_id,
        )
    )
    reservation = result.scalar_one_or_none()

    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reservation not found",
        )
    return reservation


async def _check_date_conflict(
    db: AsyncSession,
    property_id: uuid.UUID,
    check_in: datetime,
    check_out: datetime,
    exclude_reservation_id: uuid.UUID | None = None,
) -> None:
    """Raise 409 if there is an overlapping non-cancelled reservation."""
    query = select(Reservation).where(
        Reservation.property_id == property_id,
        Reservation.status != "cancelled",
        Reservation.check_in < check_out,
        Reservation.check_out > check_in,
    )
    if exclude_reservation_id is not None:
        query = query.where(Reservation.id != exclude_reservation_id)

    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Dates conflict with an existing reservation",
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new reservation",
)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> Reservation:
    """Create a reservation on one of the tenant's properties.

    Validates that:
    - The property belongs to the caller's tenant.
    - There are no date conflicts with existing non-cancelled reservations.
    """
    await get_tenant_property(body.property_id, tenant, db)
    await _check_date_conflict(db, body.property_id, body.check_in, body.check_out)

    reservation = Reservation(tenant_id=tenant.tenant_id, **body.model_dump())
    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)
    return reservation


@router.get(
    "",
    response_model=ReservationListResponse,
    summary="List the tenant's reservations",
)
async def list_reservations(
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    status_filter: str | None = Query(None, alias="status", description="Filter by reservation status"),
    check_in_from: datetime | None = Query(None, description="Reservations with check_in >= this instant"),
    check_in_to: datetime | None = Query(None, description="Reservations with check_in <= this instant"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> dict:
    """Return a paginated list of the tenant's reservations, newest first."""
    filters = [Reservation.tenant_id == tenant.tenant_id]
    if property_id is not None:
        filters.append(Reservation.property_id == property_id)
    if status_filter is not None:
        filters.append(Reservation.status == status_filter)
    if check_in_from is not None:
        filters.append(Reservation.check_in >= check_in_from)
    if check_in_to is not None:
        filters.append(Reservation.check_in <= check_in_to)

    # Total count
    total_result = await db.execute(select(func.count()).select_from(Reservation).where(*filters))
    total = total_result.scalar_one()

    # Fetch page
    items_query = select(Reservation).where(*filters).order_by(Reservation.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return {"items": items, "total": total}


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get a reservation by ID",
)
async def get_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> Reservation:
    """Retrieve a single reservation. Returns 404 if missing or owned by another tenant."""
    return await _get_tenant_reservation(reservation_id, tenant, db)


@router.put(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Update a reservation",
)
async def update_reservation(
    reservation_id: uuid.UUID,
    body: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> Reservation:
    """Partially update a reservation.

    Re-runs date conflict detection when dates or the property change. A new
    ``property_id`` must also belong to the caller's tenant.
    """
    reservation = await _get_tenant_reservation(reservation_id, tenant, db)

    update_data = body.model_dump(exclude_unset=True)
    for field in _NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    property_changed = "property_id" in update_data and update_data["property_id"] != reservation.property_id
    if property_changed:
        await get_tenant_property(update_data["property_id"], tenant, db)

    effective_check_in = update_data.get("check_in", reservation.check_in)
    effective_check_out = update_data.get("check_out", reservation.check_out)
    effective_property_id = update_data.get("property_id", reservation.property_id)

    dates_changed = "check_in" in update_data or "check_out" in update_data
    if dates_changed and effective_check_out <= effective_check_in:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="check_out must be after check_in",
        )

    if dates_changed or property_changed:
        await _check_date_conflict(
            db,
            effective_property_id,
            effective_check_in,
            effective_check_out,
            exclude_reservation_id=reservation.id,
        )

    for field, value in update_data.items():
        setattr(reservation, field, value)

    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)
    return reservation


@router.delete(
    "/{reservation_id}",
    response_model=MessageResponse,
    summary="Delete a reservation",
)
async def delete_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> dict:
    """Delete one of the tenant's reservations."""
    reservation = await _get_tenant_reservation(reservation_id, tenant, db)

    await db.delete(reservation)
    await db.flush()
    return {"message": "Reservation deleted"}
