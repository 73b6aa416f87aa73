"""Purchase repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.purchase import Purchase


class IPurchaseRepository(Protocol):
    """Repository interface for Purchase entities (append-only)."""

    async def create(self, purchase: Purchase) -> Purchase:
        """Record a new purchase."""
        ...

    async def list_for_buyer(self, buyer_id: UUID) -> list[Purchase]:
        """Get a buyer's purchases, newest first."""
        ...

    async def list_for_seller(
        self, seller_id: UUID, limit: int | None = None
    ) -> list[Purchase]:
        """Get a seller's orders, newest first."""
        ...
