"""Activity service layer for the admin console feed."""

from collections.abc import Callable
from uuid import UUID

from domain.entities.activity import ActivityLog
from domain.repositories.unit_of_work import IUnitOfWork


class ActivityService:
    """Service layer for activity logging and retrieval."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def log(
        self,
        uow: IUnitOfWork,
        action: str,
        actor_id: UUID,
        subject_id: UUID,
        description: str,
    ) -> ActivityLog:
        """Log an activity within an existing UoW transaction.

        Called from other services so the entry commits (or rolls back)
        together with the change it describes.

        Args:
            uow: The active Unit of Work (caller manages commit).
            action: The action string (use Actions constants).
            actor_id: The profile that performed the action.
            subject_id: The seller profile the action is about.
            description: Human-readable summary for the feed.

        Returns:
            The created ActivityLog entry.
        """
        activity = ActivityLog(
            action=action,
            actor_id=actor_id,
            subject_id=subject_id,
            description=description,
        )
        return await uow.activities.create(activity)

    async def get_seller_history(self, seller_id: UUID, limit: int = 50) -> list[ActivityLog]:
        """Get activity entries about one seller, newest first."""
        async with self._uow_factory() as uow:
            return await uow.activities.get_for_subject(  # type: ignore[no-any-return]
                seller_id, limit=limit
            )
