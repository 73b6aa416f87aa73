"""Payment gateway protocol and the development stub."""

from dataclasses import dataclass
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentCard:
    """Card details as entered on the purchase form."""

    card_number: str
    expiration_date: str
    cvv: str

    @property
    def digits(self) -> str:
        return self.card_number.replace(" ", "")

    @property
    def last4(self) -> str:
        return self.digits[-4:]


class IPaymentGateway(Protocol):
    """Protocol for charging a buyer's card."""

    async def process_payment(self, card: PaymentCard, amount: int) -> bool:
        """Charge ``amount`` to ``card``. Returns False when declined."""
        ...


class StubPaymentGateway:
    """Accepts every payment. No money moves."""

    async def process_payment(self, card: PaymentCard, amount: int) -> bool:
        logger.info("payment_stub_accepted", card_last4=card.last4, amount=amount)
        return True
