"""Admin console API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import AdminSession
from api.v1.dependencies import get_activity_service, get_admin_service
from api.v1.schemas.activity import ActivityListResponse, ActivityLogResponse
from api.v1.schemas.admin import (
    AdminSellerUpdate,
    ApprovalRequest,
    MarketplaceStatsResponse,
    SellerDetail,
    SellerDetailResponse,
    SellerListResponse,
    StatsDetailResponse,
)
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.activity_service import ActivityService
from domain.services.admin_service import AdminService, SellerStatusFilter

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=StatsDetailResponse, summary="Marketplace stats")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_stats(
    request: Request,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> StatsDetailResponse:
    stats = await service.get_stats(session)
    return StatsDetailResponse(data=MarketplaceStatsResponse.model_validate(stats))


@router.get("/sellers", response_model=SellerListResponse, summary="List sellers")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_sellers(
    request: Request,
    session: AdminSession,
    status: SellerStatusFilter = Query(SellerStatusFilter.ALL),
    service: AdminService = Depends(get_admin_service),
) -> SellerListResponse:
    """Sellers newest first, filtered by approval status."""
    sellers = await service.list_sellers(session, status)
    return SellerListResponse(
        data=[ProfileResponse.model_validate(s) for s in sellers],
        meta={"total": len(sellers), "status": status.value},
    )


@router.get(
    "/sellers/{seller_id}",
    response_model=SellerDetailResponse,
    summary="Get seller details",
    responses={404: {"description": "Seller not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_seller(
    request: Request,
    seller_id: UUID,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
    activity_service: ActivityService = Depends(get_activity_service),
) -> SellerDetailResponse:
    """Seller profile with the activity recorded about it."""
    seller = await service.get_seller(session, seller_id)
    history = await activity_service.get_seller_history(seller_id, limit=20)
    return SellerDetailResponse(
        data=SellerDetail(
            seller=ProfileResponse.model_validate(seller),
            activity=[ActivityLogResponse.model_validate(a) for a in history],
        )
    )


@router.post(
    "/sellers/{seller_id}/approval",
    response_model=ProfileDetailResponse,
    summary="Approve or unapprove a seller",
    responses={404: {"description": "Seller not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def set_approval(
    request: Request,
    seller_id: UUID,
    body: ApprovalRequest,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> ProfileDetailResponse:
    """
    Set the approval flag. When `active` is omitted it follows `approved`.
    """
    seller = await service.set_approval(session, seller_id, body.approved, body.active)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(seller))


@router.patch(
    "/sellers/{seller_id}",
    response_model=ProfileDetailResponse,
    summary="Edit a seller",
    responses={
        404: {"description": "Seller not found"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_seller(
    request: Request,
    seller_id: UUID,
    body: AdminSellerUpdate,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> ProfileDetailResponse:
    """Partial update; each supplied field is applied independently."""
    seller = await service.update_seller(
        session, seller_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(seller))


@router.get("/activity", response_model=ActivityListResponse, summary="Activity feed")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_activity(
    request: Request,
    session: AdminSession,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: AdminService = Depends(get_admin_service),
) -> ActivityListResponse:
    """Marketplace activity, newest first."""
    activities = await service.list_activity(session, limit=limit, offset=offset)
    return ActivityListResponse(
        data=[ActivityLogResponse.model_validate(a) for a in activities],
        meta={"limit": limit, "offset": offset},
    )
