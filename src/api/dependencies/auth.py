"""Authentication dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.profile import Role
from domain.services.session_service import SessionService, UserSession
from infrastructure.auth.provider import IIdentityProvider
from infrastructure.auth.supabase_provider import SupabaseIdentityProvider
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_identity_provider() -> IIdentityProvider:
    """Get the identity provider client."""
    return SupabaseIdentityProvider()


@lru_cache
def get_session_service() -> SessionService:
    """Get Session service instance."""
    return SessionService(get_uow_factory(), get_identity_provider())


async def get_current_session(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    session_service: SessionService = Depends(get_session_service),
) -> UserSession:
    """
    Dependency to open the caller's session.

    Raises:
        AuthenticationError: If no token provided or token is invalid
        ProfileNotFoundError: If the identity has no profile
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    return await session_service.open(credentials.credentials)


def require_role(*roles: Role) -> Callable[..., UserSession]:
    """Build a dependency that admits only sessions with one of ``roles``."""

    def dependency(
        session: Annotated[UserSession, Depends(get_current_session)],
    ) -> UserSession:
        session.require_role(*roles)
        return session

    return dependency


# Type aliases for convenience in route handlers
CurrentSession = Annotated[UserSession, Depends(get_current_session)]
BuyerSession = Annotated[UserSession, Depends(require_role(Role.BUYER))]
SellerSession = Annotated[UserSession, Depends(require_role(Role.SELLER))]
AdminSession = Annotated[UserSession, Depends(require_role(Role.ADMIN))]
