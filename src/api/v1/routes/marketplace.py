"""Marketplace API routes for buyers."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import BuyerSession
from api.v1.dependencies import get_marketplace_service
from api.v1.schemas.common import GeoPointSchema
from api.v1.schemas.marketplace import (
    NearbySellerListResponse,
    NearbySellerResponse,
    PurchasableSeller,
    PurchasableSellerResponse,
)
from core.config import settings
from core.rate_limit import READ_LIMIT, limiter
from domain.entities.profile import GeoPoint
from domain.services.marketplace_service import MarketplaceService

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


@router.get(
    "/sellers/nearby",
    response_model=NearbySellerListResponse,
    summary="Find nearby sellers",
    responses={
        200: {"description": "Sellers in range with stock, nearest first"},
        403: {"description": "Buyer role required"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def find_nearby_sellers(
    request: Request,
    session: BuyerSession,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(settings.default_search_radius_km, gt=0, le=20000),
    service: MarketplaceService = Depends(get_marketplace_service),
) -> NearbySellerListResponse:
    """
    Approved, active sellers with stock within `radius_km` of the point.

    Distances are great-circle kilometres rounded to two decimals.
    """
    origin = GeoPoint(latitude=latitude, longitude=longitude)
    matches = await service.search_nearby(session, origin, radius_km)
    data = [
        NearbySellerResponse(
            id=match.seller.id,
            contact_name=match.seller.contact_name,
            phone_number=match.seller.phone_number,
            cylinders_available=match.seller.cylinders_available,
            location=GeoPointSchema.from_point(match.seller.location),
            distance_km=match.distance_km,
        )
        for match in matches
    ]
    return NearbySellerListResponse(
        data=data,
        meta={
            "total": len(data),
            "radius_km": radius_km,
            "origin": {"latitude": latitude, "longitude": longitude},
        },
    )


@router.get(
    "/sellers/{seller_id}",
    response_model=PurchasableSellerResponse,
    summary="Get a seller to buy from",
    responses={
        404: {"description": "Seller not found"},
        409: {"description": "Seller not approved, not active or out of stock"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_seller(
    request: Request,
    seller_id: UUID,
    session: BuyerSession,
    service: MarketplaceService = Depends(get_marketplace_service),
) -> PurchasableSellerResponse:
    seller = await service.get_purchasable_seller(session, seller_id)
    return PurchasableSellerResponse(
        data=PurchasableSeller(
            id=seller.id,
            contact_name=seller.contact_name,
            phone_number=seller.phone_number,
            cylinders_available=seller.cylinders_available,
            location=GeoPointSchema.from_point(seller.location),
            price_per_cylinder=settings.price_per_cylinder,
        )
    )
