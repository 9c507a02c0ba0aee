"""Pydantic v2 schemas shared by authenticated endpoints."""

import uuid

from pydantic import BaseModel, ConfigDict


class TenantContext(BaseModel):
    """Identity extracted from a verified access token."""

    user_id: uuid.UUID
    tenant_id: uuid.UUID

    model_config = ConfigDict(frozen=True)


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
