"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import MarketplaceStats, UserProfile


class IProfileRepository(Protocol):
    """Repository interface for UserProfile entities."""

    async def get(self, id: UUID) -> UserProfile | None:
        """Get a profile by identity ID."""
        ...

    async def create(self, profile: UserProfile) -> UserProfile:
        """Create a new profile."""
        ...

    async def update(self, profile: UserProfile) -> UserProfile:
        """Overwrite a profile's mutable fields (last write wins)."""
        ...

    async def list_sellers(self, approved: bool | None = None) -> list[UserProfile]:
        """List seller profiles, newest first, optionally filtered by approval."""
        ...

    async def list_active_sellers(self) -> list[UserProfile]:
        """List sellers that have not hidden themselves from buyers."""
        ...

    async def get_stats(self) -> MarketplaceStats:
        """Aggregate user and stock counters."""
        ...

    async def decrement_stock(
        self, seller_id: UUID, quantity: int, expected_version: int
    ) -> bool:
        """Conditionally decrement seller stock.

        Applies only if the row still carries ``expected_version`` and holds
        at least ``quantity`` cylinders. Returns False when nothing matched.
        """
        ...

    async def update_address(
        self, profile_id: UUID, address: str, expected_version: int
    ) -> bool:
        """Conditionally replace a buyer's delivery address."""
        ...
