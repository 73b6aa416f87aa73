"""Seller service: dashboard, stock, location and visibility."""

from collections.abc import Callable
from dataclasses import dataclass

from core.config import settings
from core.exceptions import ProfileNotFoundError, SellerNotApprovedError, ValidationFailedError
from domain.entities.profile import GeoPoint, Role, UserProfile
from domain.entities.purchase import Purchase
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_service import UserSession


@dataclass
class SellerDashboard:
    profile: UserProfile
    recent_orders: list[Purchase]


class SellerService:
    """Service layer for operations a seller performs on their own listing.

    Everything except the dashboard requires an approved seller. Stock,
    location and visibility writes are last-write-wins.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        recent_orders_limit: int = settings.seller_recent_orders_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._recent_orders_limit = recent_orders_limit

    async def get_dashboard(self, session: UserSession) -> SellerDashboard:
        """Profile plus the most recent orders. Available before approval."""
        async with self._uow_factory() as uow:
            profile = await self._load_seller(uow, session, require_approval=False)
            orders = await uow.purchases.list_for_seller(
                profile.id, limit=self._recent_orders_limit
            )
            return SellerDashboard(profile=profile, recent_orders=orders)

    async def update_stock(self, session: UserSession, cylinders_available: int) -> UserProfile:
        if cylinders_available < 0:
            raise ValidationFailedError(
                "Cylinders available must be 0 or greater", field="cylinders_available"
            )
        async with self._uow_factory() as uow:
            profile = await self._load_seller(uow, session)
            profile.cylinders_available = cylinders_available
            return await self._save(uow, profile)

    async def update_location(self, session: UserSession, location: GeoPoint) -> UserProfile:
        if not location.is_valid():
            raise ValidationFailedError("Invalid latitude or longitude", field="location")
        async with self._uow_factory() as uow:
            profile = await self._load_seller(uow, session)
            profile.location = location
            return await self._save(uow, profile)

    async def set_visibility(self, session: UserSession, active: bool) -> UserProfile:
        async with self._uow_factory() as uow:
            profile = await self._load_seller(uow, session)
            profile.active = active
            return await self._save(uow, profile)

    async def list_orders(self, session: UserSession) -> list[Purchase]:
        """All orders received by the seller, newest first."""
        async with self._uow_factory() as uow:
            profile = await self._load_seller(uow, session)
            return await uow.purchases.list_for_seller(profile.id)  # type: ignore[no-any-return]

    async def _load_seller(
        self, uow: IUnitOfWork, session: UserSession, require_approval: bool = True
    ) -> UserProfile:
        session.require_role(Role.SELLER)
        # Re-read so an approval granted after sign-in takes effect at once
        profile = await uow.profiles.get(session.user_id)
        if not profile:
            raise ProfileNotFoundError(str(session.user_id))
        if require_approval and not profile.approved:
            raise SellerNotApprovedError()
        return profile

    async def _save(self, uow: IUnitOfWork, profile: UserProfile) -> UserProfile:
        profile.touch()
        updated = await uow.profiles.update(profile)
        await uow.commit()
        return updated
