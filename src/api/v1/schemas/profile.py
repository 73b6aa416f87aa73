"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import PHONE_PATTERN, GeoPointSchema
from domain.entities.profile import Role


class ProfileResponse(BaseModel):
    """Schema for a user profile."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "seller@example.com",
                "role": "seller",
                "contact_name": "City Oxygen Supply",
                "phone_number": "+91 98765 43210",
                "approved": True,
                "active": True,
                "cylinders_available": 12,
                "location": {"latitude": 28.6139, "longitude": 77.209},
                "address": None,
                "license_number": "DL-OX-2291",
                "licensee_name_address": None,
                "license_validity": "2027-03-31",
                "license_type": "Storage",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    email: str
    role: Role
    contact_name: str
    phone_number: str
    approved: bool
    active: bool
    cylinders_available: int | None = None
    location: GeoPointSchema | None = None
    address: str | None = None
    license_number: str | None = None
    licensee_name_address: str | None = None
    license_validity: str | None = None
    license_type: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Response wrapper for a single profile."""

    data: ProfileResponse


class ProfileUpdate(BaseModel):
    """Self-service profile edit (all fields optional).

    ``address`` applies to buyers only; the license fields to sellers only.
    """

    model_config = ConfigDict(extra="forbid")

    contact_name: str | None = Field(None, min_length=2, max_length=100)
    phone_number: str | None = Field(None, min_length=10, max_length=30, pattern=PHONE_PATTERN)
    address: str | None = Field(None, max_length=500)
    license_number: str | None = Field(None, max_length=100)
    licensee_name_address: str | None = Field(None, max_length=500)
    license_validity: str | None = Field(None, max_length=100)
    license_type: str | None = Field(None, max_length=100)
