"""Activity log repository protocol."""

from typing import List, Protocol
from uuid import UUID

from domain.entities.activity import ActivityLog


class IActivityRepository(Protocol):
    """Repository interface for ActivityLog entities."""

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Create a new activity log entry."""
        ...

    async def list_recent(self, limit: int = 50, offset: int = 0) -> List[ActivityLog]:
        """Get activity log entries, ordered by newest first."""
        ...

    async def get_for_subject(self, subject_id: UUID, limit: int = 50) -> List[ActivityLog]:
        """Get activity log entries about a specific profile."""
        ...
