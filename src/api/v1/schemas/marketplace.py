"""Pydantic schemas for Marketplace API."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import GeoPointSchema


class SellerListing(BaseModel):
    """Public view of a seller, as shown to buyers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    contact_name: str
    phone_number: str
    cylinders_available: int | None = None
    location: GeoPointSchema | None = None


class NearbySellerResponse(SellerListing):
    distance_km: float


class NearbySellerListResponse(BaseModel):
    """Schema for nearby-seller search results, nearest first."""

    data: list[NearbySellerResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class PurchasableSeller(SellerListing):
    price_per_cylinder: int


class PurchasableSellerResponse(BaseModel):
    data: PurchasableSeller
