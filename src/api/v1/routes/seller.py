"""Seller dashboard API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import SellerSession
from api.v1.dependencies import get_seller_service
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse
from api.v1.schemas.purchase import PurchaseListResponse, PurchaseResponse
from api.v1.schemas.seller import (
    LocationUpdate,
    SellerDashboard,
    SellerDashboardResponse,
    StockUpdate,
    VisibilityUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import GeoPoint
from domain.services.seller_service import SellerService

router = APIRouter(prefix="/seller", tags=["seller"])

_APPROVAL_REQUIRED = {403: {"description": "Seller role and approval required"}}


@router.get("", response_model=SellerDashboardResponse, summary="Seller dashboard")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_dashboard(
    request: Request,
    session: SellerSession,
    service: SellerService = Depends(get_seller_service),
) -> SellerDashboardResponse:
    """Profile and most recent orders. Available while approval is pending."""
    dashboard = await service.get_dashboard(session)
    return SellerDashboardResponse(
        data=SellerDashboard(
            profile=ProfileResponse.model_validate(dashboard.profile),
            recent_orders=[PurchaseResponse.model_validate(p) for p in dashboard.recent_orders],
        )
    )


@router.put(
    "/stock",
    response_model=ProfileDetailResponse,
    summary="Set available cylinders",
    responses=_APPROVAL_REQUIRED,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_stock(
    request: Request,
    body: StockUpdate,
    session: SellerSession,
    service: SellerService = Depends(get_seller_service),
) -> ProfileDetailResponse:
    profile = await service.update_stock(session, body.cylinders_available)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.put(
    "/location",
    response_model=ProfileDetailResponse,
    summary="Set shop location",
    responses=_APPROVAL_REQUIRED,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_location(
    request: Request,
    body: LocationUpdate,
    session: SellerSession,
    service: SellerService = Depends(get_seller_service),
) -> ProfileDetailResponse:
    profile = await service.update_location(
        session, GeoPoint(latitude=body.latitude, longitude=body.longitude)
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.put(
    "/visibility",
    response_model=ProfileDetailResponse,
    summary="Show or hide the listing",
    responses=_APPROVAL_REQUIRED,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_visibility(
    request: Request,
    body: VisibilityUpdate,
    session: SellerSession,
    service: SellerService = Depends(get_seller_service),
) -> ProfileDetailResponse:
    profile = await service.set_visibility(session, body.active)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/orders",
    response_model=PurchaseListResponse,
    summary="List all orders",
    responses=_APPROVAL_REQUIRED,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_orders(
    request: Request,
    session: SellerSession,
    service: SellerService = Depends(get_seller_service),
) -> PurchaseListResponse:
    orders = await service.list_orders(session)
    return PurchaseListResponse(
        data=[PurchaseResponse.model_validate(p) for p in orders],
        meta={"total": len(orders)},
    )
