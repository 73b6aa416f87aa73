"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.activity_repository import IActivityRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.purchase_repository import IPurchaseRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions.

    Everything written through the repositories of one unit becomes visible
    together on ``commit`` or not at all.
    """

    profiles: IProfileRepository
    purchases: IPurchaseRepository
    activities: IActivityRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
