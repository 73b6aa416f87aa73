"""Per-request user sessions built from bearer tokens."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import structlog

from core.exceptions import (
    AuthenticationError,
    ErrorCode,
    IdentityProviderError,
    ProfileNotFoundError,
    RoleRequiredError,
)
from domain.entities.profile import Role, UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import IIdentityProvider, TokenUser

logger = structlog.get_logger(__name__)


@dataclass
class UserSession:
    """An authenticated identity together with its profile.

    Created for each request and passed explicitly to the operations that
    need the caller's identity.
    """

    access_token: str
    identity: TokenUser
    profile: UserProfile

    @property
    def user_id(self) -> UUID:
        return self.profile.id

    @property
    def role(self) -> Role:
        return self.profile.role

    def require_role(self, *roles: Role) -> None:
        if self.profile.role not in roles:
            raise RoleRequiredError(" or ".join(role.value for role in roles))


class SessionService:
    """Opens and closes user sessions."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider

    async def open(self, access_token: str) -> UserSession:
        """Validate a token and load the caller's profile.

        A valid token without a profile is signed out before the
        ProfileNotFoundError is raised.

        Raises:
            AuthenticationError: If the token is invalid or expired
            ProfileNotFoundError: If no profile exists for the identity
        """
        identity = await self._identity.validate_token(access_token)
        if identity is None:
            raise AuthenticationError(
                message="Invalid or expired token",
                error_code=ErrorCode.INVALID_TOKEN,
            )

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(identity.id)

        if profile is None:
            logger.warning("session_profile_missing", user_id=str(identity.id))
            try:
                await self._identity.sign_out(access_token)
            except IdentityProviderError:
                logger.exception("session_sign_out_failed", user_id=str(identity.id))
            raise ProfileNotFoundError(str(identity.id))

        structlog.contextvars.bind_contextvars(user_id=str(profile.id), role=profile.role.value)
        return UserSession(access_token=access_token, identity=identity, profile=profile)

    async def close(self, session: UserSession) -> None:
        """Sign the session out at the identity provider."""
        await self._identity.sign_out(session.access_token)
        logger.info("session_closed", user_id=str(session.user_id))
