"""SQLAlchemy implementation of Activity Log repository."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.activity import ActivityLog
from infrastructure.database.models import ActivityLogModel


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Create a new activity log entry."""
        model = self._to_model(activity)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def list_recent(self, limit: int = 50, offset: int = 0) -> List[ActivityLog]:
        """Get activity log entries, ordered by newest first."""
        stmt = (
            select(ActivityLogModel)
            .order_by(ActivityLogModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_subject(self, subject_id: UUID, limit: int = 50) -> List[ActivityLog]:
        """Get activity log entries about a specific profile."""
        stmt = (
            select(ActivityLogModel)
            .where(ActivityLogModel.subject_id == subject_id)
            .order_by(ActivityLogModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        """Convert ORM model to domain entity."""
        return ActivityLog(
            id=model.id,
            action=model.action,
            actor_id=model.actor_id,
            subject_id=model.subject_id,
            description=model.description,
            created_at=model.created_at,
        )

    def _to_model(self, entity: ActivityLog) -> ActivityLogModel:
        """Convert domain entity to ORM model."""
        return ActivityLogModel(
            id=entity.id,
            action=entity.action,
            actor_id=entity.actor_id,
            subject_id=entity.subject_id,
            description=entity.description,
            created_at=entity.created_at,
        )
