"""Marketplace service: buyer-facing seller discovery."""

from collections.abc import Callable
from uuid import UUID

from core.config import settings
from core.exceptions import SellerNotFoundError, SellerUnavailableError
from domain.entities.profile import GeoPoint, Role, UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.geosearch import NearbySeller, find_nearby_sellers
from domain.services.session_service import UserSession


class MarketplaceService:
    """Service layer for finding sellers to buy from."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        default_radius_km: float = settings.default_search_radius_km,
    ) -> None:
        self._uow_factory = uow_factory
        self._default_radius_km = default_radius_km

    async def search_nearby(
        self,
        session: UserSession,
        origin: GeoPoint,
        radius_km: float | None = None,
    ) -> list[NearbySeller]:
        """Find purchasable sellers around ``origin``, nearest first."""
        session.require_role(Role.BUYER)
        radius = self._default_radius_km if radius_km is None else radius_km

        async with self._uow_factory() as uow:
            candidates = await uow.profiles.list_active_sellers()

        return find_nearby_sellers(origin, radius, candidates)

    async def get_purchasable_seller(self, session: UserSession, seller_id: UUID) -> UserProfile:
        """Load a seller for the purchase page.

        Raises:
            SellerNotFoundError: No profile, or the profile is not a seller
            SellerUnavailableError: Not approved, not active or out of stock
        """
        session.require_role(Role.BUYER)
        async with self._uow_factory() as uow:
            seller = await uow.profiles.get(seller_id)

        if seller is None or seller.role is not Role.SELLER:
            raise SellerNotFoundError(str(seller_id))
        reason = seller.unavailable_reason()
        if reason:
            raise SellerUnavailableError(str(seller_id), reason)
        return seller
