"""Pydantic schemas for Purchase API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import GeoPointSchema


class PurchaseCreate(BaseModel):
    """Schema for buying cylinders from a seller.

    Card fields are checked by the purchase service before any charge.
    """

    seller_id: UUID
    quantity: int = Field(..., ge=1)
    card_number: str = Field(..., max_length=32)
    expiration_date: str = Field(..., max_length=5)
    cvv: str = Field(..., max_length=4)
    delivery_address: str | None = Field(None, max_length=500)
    buyer_location: GeoPointSchema | None = None


class PurchaseResponse(BaseModel):
    """Schema for a recorded purchase."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    buyer_id: UUID
    seller_id: UUID
    quantity: int
    price_per_cylinder: int
    total_amount: int
    status: str
    buyer_email: str | None = None
    buyer_contact_name: str | None = None
    seller_name: str | None = None
    payment_card_last4: str | None = None
    buyer_address: str | None = None
    buyer_location: GeoPointSchema | None = None
    purchase_date: datetime


class PurchaseDetailResponse(BaseModel):
    data: PurchaseResponse


class PurchaseListResponse(BaseModel):
    """Schema for a list of purchases, newest first."""

    data: list[PurchaseResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
