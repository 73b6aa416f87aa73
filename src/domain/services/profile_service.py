"""Profile service: self-service profile edits for every role."""

from collections.abc import Callable
from typing import Any, assert_never

from core.exceptions import ProfileNotFoundError, ValidationFailedError
from domain.entities.profile import Role, UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_service import UserSession

COMMON_FIELDS = frozenset({"contact_name", "phone_number"})
BUYER_FIELDS = frozenset({"address"})
SELLER_FIELDS = frozenset(
    {"license_number", "licensee_name_address", "license_validity", "license_type"}
)


def editable_fields(role: Role) -> frozenset[str]:
    """Profile fields a user with ``role`` may change on their own profile."""
    match role:
        case Role.BUYER:
            return COMMON_FIELDS | BUYER_FIELDS
        case Role.SELLER:
            return COMMON_FIELDS | SELLER_FIELDS
        case Role.ADMIN:
            return COMMON_FIELDS
        case _:
            assert_never(role)


class ProfileService:
    """Service layer for reading and editing one's own profile."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_profile(self, session: UserSession) -> UserProfile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(session.user_id)
            if not profile:
                raise ProfileNotFoundError(str(session.user_id))
            return profile

    async def update_profile(self, session: UserSession, changes: dict[str, Any]) -> UserProfile:
        """Apply the supplied field changes to the caller's profile.

        Raises:
            ValidationFailedError: A field does not apply to the caller's role
        """
        allowed = editable_fields(session.role)
        for name in changes:
            if name not in allowed:
                raise ValidationFailedError(
                    f"Field '{name}' cannot be set for a {session.role.value} profile",
                    field=name,
                )

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(session.user_id)
            if not profile:
                raise ProfileNotFoundError(str(session.user_id))

            for name, value in changes.items():
                setattr(profile, name, value)
            profile.touch()

            updated = await uow.profiles.update(profile)
            await uow.commit()
            return updated  # type: ignore[no-any-return]
