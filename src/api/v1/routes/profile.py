"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentSession
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse, ProfileUpdate
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileDetailResponse, summary="Get own profile")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    profile = await service.get_profile(session)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Update own profile",
    responses={
        422: {"description": "Invalid value, or field not applicable to the role"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Partial update of the caller's profile.

    Buyers may set `address`; sellers may set the license fields.
    """
    profile = await service.update_profile(
        session, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))
