"""Properties CRUD API routes — tenant-scoped."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_tenant, get_db
from app.models.property import Property
from app.schemas.auth import MessageResponse, TenantContext
from app.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

# Columns that keep their stored value when an update sends null
_NON_NULLABLE_FIELDS = ("name", "is_active")


async def get_tenant_property(
    property_id: uuid.UUID,
    tenant: TenantContext,
    db: AsyncSession,
) -> Property:
    """Fetch a property of the current tenant or raise ``HTTPException 404``."""
    result = await db.execute(
        select(Property).where(Property.id == property_id, Property.tenant_id == tenant.tenant_id)
    )
    prop = result.scalar_one_or_none()

    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return prop


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> PropertyResponse:
    """Create a property owned by the caller's tenant."""
    prop = Property(
        tenant_id=tenant.tenant_id,
        **body.model_dump(),
    )
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List the tenant's properties",
)
async def list_properties(
    is_active: bool | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> PropertyListResponse:
    """Return paginated properties belonging to the caller's tenant."""
    filters = [Property.tenant_id == tenant.tenant_id]
    if is_active is not None:
        filters.append(Property.is_active == is_active)

    # Total count
    count_query = select(func.count()).select_from(Property).where(*filters)
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    # Fetch page
    items_query = select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> PropertyResponse:
    """Retrieve a single property. Returns 404 if not found or owned by another tenant."""
    prop = await get_tenant_property(property_id, tenant, db)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    prop = await get_tenant_property(property_id, tenant, db)

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in _NON_NULLABLE_FIELDS:
            continue
        setattr(prop, field, value)

    db.add(prop)
    await db.flush()
    await db.refresh(prop)

    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
) -> MessageResponse:
    """Delete a property and cascade-delete its reservations."""
    prop = await get_tenant_property(property_id, tenant, db)

    await db.delete(prop)
    await db.flush()

    return MessageResponse(message="Property deleted")
