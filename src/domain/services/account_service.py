"""Account service: registration, login and password management."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

import structlog

from core.config import settings
from core.exceptions import (
    InvalidCredentialsError,
    ProfileNotFoundError,
    RoleNotAllowedError,
    ValidationFailedError,
    WeakPasswordError,
)
from domain.entities.activity import Actions
from domain.entities.profile import Role, UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.password_policy import REGISTRATION_MIN_SCORE, evaluate_password
from domain.services.session_service import UserSession
from infrastructure.auth.provider import AuthSession, IIdentityProvider

logger = structlog.get_logger(__name__)


@dataclass
class LoginResult:
    auth: AuthSession
    profile: UserProfile


class AccountService:
    """Service layer for identity-backed account operations."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
        activity_service: Optional[ActivityService] = None,
        allow_admin_registration: bool = settings.allow_admin_registration,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider
        self._activity = activity_service
        self._allow_admin_registration = allow_admin_registration

    async def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        role: Role,
        contact_name: str,
        phone_number: str,
    ) -> UserProfile:
        """Create an identity and its profile with the role's defaults.

        Raises:
            RoleNotAllowedError: Admin self-registration is disabled
            ValidationFailedError: Passwords do not match
            WeakPasswordError: Password scores below the registration minimum
            EmailInUseError: Email already registered
        """
        if role is Role.ADMIN and not self._allow_admin_registration:
            raise RoleNotAllowedError(role.value)
        if password != confirm_password:
            raise ValidationFailedError("Passwords don't match", field="confirm_password")
        if evaluate_password(password).score < REGISTRATION_MIN_SCORE:
            raise WeakPasswordError()

        identity = await self._identity.register(email, password, contact_name)
        profile = UserProfile.register(
            id=identity.id,
            role=role,
            email=identity.email or email,
            contact_name=contact_name,
            phone_number=phone_number,
        )

        try:
            async with self._uow_factory() as uow:
                created = await uow.profiles.create(profile)
                if role is Role.SELLER and self._activity:
                    await self._activity.log(
                        uow=uow,
                        action=Actions.SELLER_REGISTERED,
                        actor_id=created.id,
                        subject_id=created.id,
                        description=f"New seller registered: {created.display_name}",
                    )
                await uow.commit()
        except Exception:
            # The identity already exists at the provider; it has no profile.
            logger.error("profile_create_failed", user_id=str(identity.id), role=role.value)
            raise

        logger.info("account_registered", user_id=str(created.id), role=role.value)
        return created

    async def login(self, email: str, password: str) -> LoginResult:
        """Sign in and load the profile.

        Raises:
            InvalidCredentialsError: Email/password rejected
            ProfileNotFoundError: Identity has no profile (session is signed out)
        """
        auth = await self._identity.authenticate(email, password)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(auth.user.id)

        if profile is None:
            logger.warning("login_profile_missing", user_id=str(auth.user.id))
            await self._identity.sign_out(auth.access_token)
            raise ProfileNotFoundError(str(auth.user.id))

        logger.info("login_succeeded", user_id=str(profile.id), role=profile.role.value)
        return LoginResult(auth=auth, profile=profile)

    async def change_password(
        self,
        session: UserSession,
        current_password: str,
        new_password: str,
        confirm_new_password: str,
    ) -> None:
        """Re-authenticate with the current password, then set the new one.

        Raises:
            ValidationFailedError: New passwords do not match
            WeakPasswordError: New password misses any policy criterion
            InvalidCredentialsError: Current password is wrong
        """
        if new_password != confirm_new_password:
            raise ValidationFailedError("New passwords do not match.", field="confirm_new_password")
        if not evaluate_password(new_password).all_met:
            raise WeakPasswordError(
                "New password does not meet all strength criteria "
                "(min 8 chars, uppercase, lowercase, number, special character)."
            )

        try:
            reauth = await self._identity.authenticate(session.profile.email, current_password)
        except InvalidCredentialsError:
            raise InvalidCredentialsError("Incorrect current password") from None

        await self._identity.change_password(reauth.access_token, new_password)
        logger.info("password_changed", user_id=str(session.user_id))
