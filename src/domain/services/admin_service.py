"""Admin service: marketplace stats and seller moderation."""

from collections.abc import Callable
from enum import StrEnum
from typing import Any, Optional
from uuid import UUID

import structlog

from core.exceptions import SellerNotFoundError, ValidationFailedError
from domain.entities.activity import Actions, ActivityLog
from domain.entities.profile import MarketplaceStats, Role, UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.session_service import UserSession

logger = structlog.get_logger(__name__)

ADMIN_EDITABLE_FIELDS = frozenset(
    {"contact_name", "phone_number", "cylinders_available", "approved", "active"}
)


class SellerStatusFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"


class AdminService:
    """Service layer for the admin console."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional[ActivityService] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service

    async def get_stats(self, session: UserSession) -> MarketplaceStats:
        session.require_role(Role.ADMIN)
        async with self._uow_factory() as uow:
            return await uow.profiles.get_stats()  # type: ignore[no-any-return]

    async def list_sellers(
        self,
        session: UserSession,
        status: SellerStatusFilter = SellerStatusFilter.ALL,
    ) -> list[UserProfile]:
        """Sellers newest first, optionally only pending or only approved."""
        session.require_role(Role.ADMIN)
        approved = {
            SellerStatusFilter.ALL: None,
            SellerStatusFilter.PENDING: False,
            SellerStatusFilter.APPROVED: True,
        }[status]
        async with self._uow_factory() as uow:
            return await uow.profiles.list_sellers(approved=approved)  # type: ignore[no-any-return]

    async def get_seller(self, session: UserSession, seller_id: UUID) -> UserProfile:
        session.require_role(Role.ADMIN)
        async with self._uow_factory() as uow:
            return await self._load_seller(uow, seller_id)

    async def set_approval(
        self,
        session: UserSession,
        seller_id: UUID,
        approved: bool,
        active: bool | None = None,
    ) -> UserProfile:
        """Approve or unapprove a seller.

        When ``active`` is omitted it follows ``approved``: approving also
        makes the seller visible, unapproving hides it.
        """
        session.require_role(Role.ADMIN)
        async with self._uow_factory() as uow:
            seller = await self._load_seller(uow, seller_id)
            seller.approved = approved
            seller.active = approved if active is None else active
            seller.touch()
            updated = await uow.profiles.update(seller)

            await self._log_approval(uow, session, updated)
            await uow.commit()

        logger.info(
            "seller_approval_changed",
            seller_id=str(seller_id),
            approved=updated.approved,
            active=updated.active,
            admin_id=str(session.user_id),
        )
        return updated  # type: ignore[no-any-return]

    async def update_seller(
        self,
        session: UserSession,
        seller_id: UUID,
        changes: dict[str, Any],
    ) -> UserProfile:
        """Apply admin edits; each field is independent of the others.

        Raises:
            ValidationFailedError: Unknown field or negative stock
            SellerNotFoundError: Profile missing or not a seller
        """
        session.require_role(Role.ADMIN)
        for name in changes:
            if name not in ADMIN_EDITABLE_FIELDS:
                raise ValidationFailedError(f"Field '{name}' cannot be edited", field=name)
        stock = changes.get("cylinders_available")
        if stock is not None and stock < 0:
            raise ValidationFailedError(
                "Cylinders available must be 0 or greater", field="cylinders_available"
            )

        async with self._uow_factory() as uow:
            seller = await self._load_seller(uow, seller_id)
            was_approved = seller.approved

            changed = []
            for name, value in changes.items():
                if getattr(seller, name) != value:
                    setattr(seller, name, value)
                    changed.append(name)

            if not changed:
                return seller

            seller.touch()
            updated = await uow.profiles.update(seller)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    action=Actions.SELLER_UPDATED,
                    actor_id=session.user_id,
                    subject_id=updated.id,
                    description=(
                        f"Seller {updated.display_name} updated by admin: "
                        f"{', '.join(sorted(changed))}"
                    ),
                )
            if updated.approved != was_approved:
                await self._log_approval(uow, session, updated)

            await uow.commit()

        logger.info(
            "seller_updated_by_admin",
            seller_id=str(seller_id),
            fields=sorted(changed),
            admin_id=str(session.user_id),
        )
        return updated  # type: ignore[no-any-return]

    async def list_activity(
        self, session: UserSession, limit: int = 50, offset: int = 0
    ) -> list[ActivityLog]:
        session.require_role(Role.ADMIN)
        async with self._uow_factory() as uow:
            return await uow.activities.list_recent(  # type: ignore[no-any-return]
                limit=limit, offset=offset
            )

    async def _load_seller(self, uow: IUnitOfWork, seller_id: UUID) -> UserProfile:
        seller = await uow.profiles.get(seller_id)
        if seller is None or seller.role is not Role.SELLER:
            raise SellerNotFoundError(str(seller_id))
        return seller

    async def _log_approval(
        self, uow: IUnitOfWork, session: UserSession, seller: UserProfile
    ) -> None:
        if not self._activity:
            return
        if seller.approved:
            action, verb = Actions.SELLER_APPROVED, "approved"
        else:
            action, verb = Actions.SELLER_UNAPPROVED, "unapproved"
        await self._activity.log(
            uow=uow,
            action=action,
            actor_id=session.user_id,
            subject_id=seller.id,
            description=f"Seller {seller.display_name} {verb}",
        )
