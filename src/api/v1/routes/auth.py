"""Auth API routes: registration, sign-in and password management."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentSession, get_session_service
from api.v1.dependencies import get_account_service
from api.v1.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    RegisterRequest,
    SessionData,
)
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.account_service import AccountService
from domain.services.password_policy import evaluate_password
from domain.services.session_service import SessionService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    responses={
        201: {"description": "Account and profile created"},
        400: {"description": "Password too weak"},
        403: {"description": "Role not allowed for self-registration"},
        409: {"description": "Email already in use"},
        502: {"description": "Identity provider error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    body: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> ProfileDetailResponse:
    """
    Create an identity and a profile with the defaults for the chosen role.

    Sellers start unapproved and hidden until an admin reviews them.
    """
    profile = await service.register(
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        role=body.role,
        contact_name=body.contact_name,
        phone_number=body.phone_number,
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    responses={
        401: {"description": "Invalid email or password"},
        404: {"description": "No profile for this account"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    body: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Exchange email and password for an access token and the profile."""
    result = await service.login(body.email, body.password)
    return LoginResponse(
        data=SessionData(
            access_token=result.auth.access_token,
            token_type=result.auth.token_type,
            expires_in=result.auth.expires_in,
            refresh_token=result.auth.refresh_token,
            profile=ProfileResponse.model_validate(result.profile),
        )
    )


@router.post("/logout", response_model=MessageResponse, summary="Sign out")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def logout(
    request: Request,
    session: CurrentSession,
    service: SessionService = Depends(get_session_service),
) -> MessageResponse:
    await service.close(session)
    return MessageResponse(message="Signed out")


@router.post(
    "/password",
    response_model=MessageResponse,
    summary="Change password",
    responses={
        400: {"description": "New password does not meet the policy"},
        401: {"description": "Incorrect current password"},
        422: {"description": "New passwords do not match"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    session: CurrentSession,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Re-authenticate with the current password, then set the new one."""
    await service.change_password(
        session,
        current_password=body.current_password,
        new_password=body.new_password,
        confirm_new_password=body.confirm_new_password,
    )
    return MessageResponse(message="Password updated successfully")


@router.post(
    "/password-strength",
    response_model=PasswordStrengthResponse,
    summary="Score a password",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def password_strength(
    request: Request,
    body: PasswordStrengthRequest,
) -> PasswordStrengthResponse:
    """Score a password: 20 points for each of the five criteria."""
    strength = evaluate_password(body.password)
    return PasswordStrengthResponse(
        criteria={
            "length": strength.length,
            "uppercase": strength.uppercase,
            "lowercase": strength.lowercase,
            "number": strength.number,
            "special": strength.special,
        },
        score=strength.score,
        label=strength.label,
    )
