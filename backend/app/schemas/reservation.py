"""Pydantic v2 request/response schemas for reservation endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.config import settings

ALL_STATUSES_PATTERN = "^(pending|confirmed|cancelled|checked_in|checked_out|visit)$"


def _assume_local(value: datetime | None) -> datetime | None:
    """Attach the configured timezone to naive datetimes."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=settings.tzinfo)
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for creating a new reservation."""

    property_id: uuid.UUID
    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_phone: str | None = Field(None, max_length=50)
    num_guests: int = Field(1, ge=1)
    check_in: datetime
    check_out: datetime
    status: str = Field("pending", pattern="^(pending|confirmed|visit)$")
    total_price: Decimal | None = Field(None, ge=0)
    special_requests: str | None = Field(None, max_length=2000)

    @field_validator("check_in", "check_out")
    @classmethod
    def _localize_dates(cls, value: datetime | None) -> datetime | None:
        return _assume_local(value)

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class ReservationUpdate(BaseModel):
    """Schema for partially updating a reservation. All fields optional."""

    property_id: uuid.UUID | None = None
    guest_name: str | None = Field(None, min_length=1, max_length=255)
    guest_phone: str | None = Field(None, max_length=50)
    num_guests: int | None = Field(None, ge=1)
    check_in: datetime | None = None
    check_out: datetime | None = None
    status: str | None = Field(None, pattern=ALL_STATUSES_PATTERN)
    total_price: Decimal | None = Field(None, ge=0)
    special_requests: str | None = Field(None, max_length=2000)

    @field_validator("check_in", "check_out")
    @classmethod
    def _localize_dates(cls, value: datetime | None) -> datetime | None:
        return _assume_local(value)

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationUpdate":
        """If both dates are provided, validate check_out > check_in."""
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReservationResponse(BaseModel):
    """Standard reservation response returned from CRUD operations."""

    id: uuid.UUID
    tenant_id: uuid.UUID
    property_id: uuid.UUID
    guest_name: str
    guest_phone: str | None = None
    num_guests: int
    check_in: datetime
    check_out: datetime
    status: str
    total_price: Decimal | None = None
    special_requests: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationListResponse(BaseModel):
    """Paginated list of reservations."""

    items: list[ReservationResponse]
    total: int
