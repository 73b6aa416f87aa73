"""Pydantic schemas for the seller dashboard API."""

from pydantic import BaseModel, Field

from api.v1.schemas.common import GeoPointSchema
from api.v1.schemas.profile import ProfileResponse
from api.v1.schemas.purchase import PurchaseResponse


class StockUpdate(BaseModel):
    cylinders_available: int = Field(..., ge=0)


class LocationUpdate(GeoPointSchema):
    pass


class VisibilityUpdate(BaseModel):
    active: bool


class SellerDashboard(BaseModel):
    profile: ProfileResponse
    recent_orders: list[PurchaseResponse]


class SellerDashboardResponse(BaseModel):
    """Seller's profile together with the most recent orders."""

    data: SellerDashboard
