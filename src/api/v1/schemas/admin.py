"""Pydantic schemas for Admin API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.activity import ActivityLogResponse
from api.v1.schemas.common import PHONE_PATTERN
from api.v1.schemas.profile import ProfileResponse


class MarketplaceStatsResponse(BaseModel):
    """Dashboard counters."""

    model_config = ConfigDict(from_attributes=True)

    total_users: int
    total_sellers: int
    total_buyers: int
    pending_approvals: int
    total_cylinders: int


class StatsDetailResponse(BaseModel):
    data: MarketplaceStatsResponse


class SellerListResponse(BaseModel):
    data: list[ProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class SellerDetail(BaseModel):
    seller: ProfileResponse
    activity: list[ActivityLogResponse]


class SellerDetailResponse(BaseModel):
    data: SellerDetail


class ApprovalRequest(BaseModel):
    """Approve or unapprove a seller. ``active`` follows ``approved`` if omitted."""

    approved: bool
    active: bool | None = None


class AdminSellerUpdate(BaseModel):
    """Admin edits to a seller; every field is independent and optional."""

    model_config = ConfigDict(extra="forbid")

    contact_name: str | None = Field(None, min_length=2, max_length=100)
    phone_number: str | None = Field(None, min_length=10, max_length=30, pattern=PHONE_PATTERN)
    cylinders_available: int | None = Field(None, ge=0)
    approved: bool | None = None
    active: bool | None = None
