"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.auth import get_identity_provider, get_uow_factory
from domain.services.account_service import AccountService
from domain.services.activity_service import ActivityService
from domain.services.admin_service import AdminService
from domain.services.marketplace_service import MarketplaceService
from domain.services.profile_service import ProfileService
from domain.services.purchase_service import PurchaseService
from domain.services.seller_service import SellerService
from infrastructure.payments.gateway import IPaymentGateway, StubPaymentGateway


@lru_cache
def get_payment_gateway() -> IPaymentGateway:
    """Get the payment gateway."""
    return StubPaymentGateway()


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(get_uow_factory())


@lru_cache
def get_account_service() -> AccountService:
    """Get Account service instance."""
    return AccountService(
        get_uow_factory(),
        get_identity_provider(),
        activity_service=get_activity_service(),
    )


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_seller_service() -> SellerService:
    """Get Seller service instance."""
    return SellerService(get_uow_factory())


@lru_cache
def get_marketplace_service() -> MarketplaceService:
    """Get Marketplace service instance."""
    return MarketplaceService(get_uow_factory())


@lru_cache
def get_purchase_service() -> PurchaseService:
    """Get Purchase service instance."""
    return PurchaseService(get_uow_factory(), get_payment_gateway())


@lru_cache
def get_admin_service() -> AdminService:
    """Get Admin service instance."""
    return AdminService(get_uow_factory(), activity_service=get_activity_service())
