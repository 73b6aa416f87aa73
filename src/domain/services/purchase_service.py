"""Purchase service: payment followed by the atomic stock/purchase transaction."""

import asyncio
import re
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from core.config import settings
from core.exceptions import (
    AppException,
    ConcurrentUpdateError,
    PaymentFailedError,
    ProfileNotFoundError,
    PurchaseFailedError,
    SellerNotFoundError,
    SellerUnavailableError,
    StockChangedError,
    ValidationFailedError,
)
from domain.entities.profile import GeoPoint, Role
from domain.entities.purchase import Purchase
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_service import UserSession
from infrastructure.payments.gateway import IPaymentGateway, PaymentCard

logger = structlog.get_logger(__name__)

CARD_NUMBER_PATTERN = re.compile(r"[0-9]{15,16}")
EXPIRY_PATTERN = re.compile(r"(0[1-9]|1[0-2])/?([0-9]{2})")
CVV_PATTERN = re.compile(r"[0-9]{3,4}")

# Failures that mean "the rows moved under us"; the whole unit is retried.
RETRYABLE_ERRORS = (ConcurrentUpdateError, OperationalError, StaleDataError)


@dataclass
class PurchaseRequest:
    seller_id: UUID
    quantity: int
    card: PaymentCard
    delivery_address: str | None = None
    buyer_location: GeoPoint | None = None


def validate_purchase_request(request: PurchaseRequest) -> None:
    """Check quantity and card fields. Raises ValidationFailedError."""
    if isinstance(request.quantity, bool) or request.quantity < 1:
        raise ValidationFailedError("Quantity must be at least 1", field="quantity")
    if not CARD_NUMBER_PATTERN.fullmatch(request.card.digits):
        raise ValidationFailedError("Invalid card number", field="card_number")
    if not EXPIRY_PATTERN.fullmatch(request.card.expiration_date):
        raise ValidationFailedError("Invalid expiry date (MM/YY)", field="expiration_date")
    if not CVV_PATTERN.fullmatch(request.card.cvv):
        raise ValidationFailedError("Invalid CVV", field="cvv")


class PurchaseService:
    """Service layer for buying cylinders.

    The card is charged once. The transaction that follows re-reads the
    seller and buyer, checks eligibility and stock, then applies a
    version-checked stock decrement, the purchase record and the optional
    address change. A version mismatch or a transient store error restarts
    the transaction from the reads; it never re-charges the card.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        payment_gateway: IPaymentGateway,
        price_per_cylinder: int = settings.price_per_cylinder,
        max_attempts: int = settings.purchase_max_attempts,
        backoff_seconds: float = settings.purchase_retry_backoff_seconds,
        payment_timeout_seconds: float = settings.payment_timeout_seconds,
    ) -> None:
        self._uow_factory = uow_factory
        self._payments = payment_gateway
        self._price = price_per_cylinder
        self._max_attempts = max(1, max_attempts)
        self._backoff = backoff_seconds
        self._payment_timeout = payment_timeout_seconds

    async def purchase(self, session: UserSession, request: PurchaseRequest) -> Purchase:
        """Charge the buyer and record the purchase.

        Raises:
            RoleRequiredError: Caller is not a buyer
            ValidationFailedError: Quantity or card fields are invalid
            PaymentFailedError: Card declined, gateway error or timeout
            SellerNotFoundError / SellerUnavailableError: Seller cannot sell
            StockChangedError: Not enough stock, or conflicts on every attempt
            PurchaseFailedError: Unexpected store failure
        """
        session.require_role(Role.BUYER)
        validate_purchase_request(request)

        amount = request.quantity * self._price
        await self._charge(request.card, amount)

        return await self._commit_with_retry(session.user_id, request)

    async def list_purchases(self, session: UserSession) -> list[Purchase]:
        """The caller's purchases, newest first."""
        session.require_role(Role.BUYER)
        async with self._uow_factory() as uow:
            return await uow.purchases.list_for_buyer(session.user_id)  # type: ignore[no-any-return]

    async def _charge(self, card: PaymentCard, amount: int) -> None:
        try:
            accepted = await asyncio.wait_for(
                self._payments.process_payment(card, amount),
                timeout=self._payment_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("payment_timeout", amount=amount, card_last4=card.last4)
            raise PaymentFailedError() from None
        except Exception:
            logger.exception("payment_gateway_error", amount=amount, card_last4=card.last4)
            raise PaymentFailedError() from None

        if not accepted:
            logger.info("payment_declined", amount=amount, card_last4=card.last4)
            raise PaymentFailedError()

    async def _commit_with_retry(self, buyer_id: UUID, request: PurchaseRequest) -> Purchase:
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await self._attempt(buyer_id, request)
            except RETRYABLE_ERRORS as exc:
                logger.warning(
                    "purchase_conflict_retry",
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    seller_id=str(request.seller_id),
                    error=type(exc).__name__,
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._backoff * (2 ** (attempt - 1)))
            except AppException:
                raise
            except SQLAlchemyError as exc:
                logger.exception("purchase_failed", seller_id=str(request.seller_id))
                raise PurchaseFailedError() from exc

        logger.warning("purchase_attempts_exhausted", seller_id=str(request.seller_id))
        raise StockChangedError(str(request.seller_id), request.quantity)

    async def _attempt(self, buyer_id: UUID, request: PurchaseRequest) -> Purchase:
        async with self._uow_factory() as uow:
            # All reads happen before the first write
            seller = await uow.profiles.get(request.seller_id)
            buyer = await uow.profiles.get(buyer_id)

            if seller is None or seller.role is not Role.SELLER:
                raise SellerNotFoundError(str(request.seller_id))
            if not seller.is_marketplace_visible:
                raise SellerUnavailableError(
                    str(seller.id), seller.unavailable_reason() or "This seller is unavailable."
                )
            available = seller.cylinders_available or 0
            if available < request.quantity:
                raise StockChangedError(str(seller.id), request.quantity, available=available)
            if buyer is None:
                raise ProfileNotFoundError(str(buyer_id))

            if not await uow.profiles.decrement_stock(
                seller.id, request.quantity, expected_version=seller.version
            ):
                raise ConcurrentUpdateError(str(seller.id))

            supplied_address = (request.delivery_address or "").strip()
            purchase = Purchase(
                buyer_id=buyer.id,
                seller_id=seller.id,
                quantity=request.quantity,
                price_per_cylinder=self._price,
                buyer_email=buyer.email,
                buyer_contact_name=buyer.contact_name,
                seller_name=seller.display_name,
                payment_card_last4=request.card.last4,
                buyer_address=supplied_address or buyer.address,
                buyer_location=request.buyer_location or buyer.location,
            )
            created = await uow.purchases.create(purchase)

            if supplied_address and supplied_address != (buyer.address or ""):
                if not await uow.profiles.update_address(
                    buyer.id, supplied_address, expected_version=buyer.version
                ):
                    raise ConcurrentUpdateError(str(buyer.id))

            await uow.commit()

        logger.info(
            "purchase_completed",
            purchase_id=str(created.id),
            seller_id=str(created.seller_id),
            buyer_id=str(created.buyer_id),
            quantity=created.quantity,
            total_amount=created.total_amount,
        )
        return created  # type: ignore[no-any-return]
