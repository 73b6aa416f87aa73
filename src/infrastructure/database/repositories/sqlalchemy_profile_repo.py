"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import GeoPoint, MarketplaceStats, Role, UserProfile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> UserProfile | None:
        """Get a profile by identity ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: UserProfile) -> UserProfile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: UserProfile) -> UserProfile:
        """Overwrite mutable fields. Role and email never change."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.contact_name = profile.contact_name
        model.phone_number = profile.phone_number
        model.approved = profile.approved
        model.active = profile.active
        model.cylinders_available = profile.cylinders_available
        model.latitude = profile.location.latitude if profile.location else None
        model.longitude = profile.location.longitude if profile.location else None
        model.address = profile.address
        model.license_number = profile.license_number
        model.licensee_name_address = profile.licensee_name_address
        model.license_validity = profile.license_validity
        model.license_type = profile.license_type
        model.version = model.version + 1
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def list_sellers(self, approved: bool | None = None) -> list[UserProfile]:
        """List seller profiles, newest first, optionally filtered by approval."""
        stmt = select(ProfileModel).where(ProfileModel.role == Role.SELLER.value)
        if approved is not None:
            stmt = stmt.where(ProfileModel.approved == approved)
        stmt = stmt.order_by(ProfileModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_active_sellers(self) -> list[UserProfile]:
        """List sellers that have not hidden themselves from buyers."""
        stmt = (
            select(ProfileModel)
            .where(
                ProfileModel.role == Role.SELLER.value,
                ProfileModel.active == True,  # noqa: E712
            )
            .order_by(ProfileModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_stats(self) -> MarketplaceStats:
        """Aggregate user and stock counters in a single query."""
        is_seller = ProfileModel.role == Role.SELLER.value
        stmt = select(
            func.count().label("total_users"),
            func.sum(case((is_seller, 1), else_=0)).label("total_sellers"),
            func.sum(case((ProfileModel.role == Role.BUYER.value, 1), else_=0)).label(
                "total_buyers"
            ),
            func.sum(
                case((is_seller & (ProfileModel.approved == False), 1), else_=0)  # noqa: E712
            ).label("pending_approvals"),
            func.sum(
                case((is_seller, func.coalesce(ProfileModel.cylinders_available, 0)), else_=0)
            ).label("total_cylinders"),
        )
        row = (await self._session.execute(stmt)).one()
        return MarketplaceStats(
            total_users=row.total_users or 0,
            total_sellers=row.total_sellers or 0,
            total_buyers=row.total_buyers or 0,
            pending_approvals=row.pending_approvals or 0,
            total_cylinders=row.total_cylinders or 0,
        )

    async def decrement_stock(
        self, seller_id: UUID, quantity: int, expected_version: int
    ) -> bool:
        """Compare-and-swap stock decrement keyed on the row version."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.id == seller_id,
                ProfileModel.version == expected_version,
                ProfileModel.cylinders_available >= quantity,
            )
            .values(
                cylinders_available=ProfileModel.cylinders_available - quantity,
                version=ProfileModel.version + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined,no-any-return]

    async def update_address(
        self, profile_id: UUID, address: str, expected_version: int
    ) -> bool:
        """Compare-and-swap delivery address update keyed on the row version."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.id == profile_id,
                ProfileModel.version == expected_version,
            )
            .values(
                address=address,
                version=ProfileModel.version + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined,no-any-return]

    def _to_entity(self, model: ProfileModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        location = None
        if model.latitude is not None and model.longitude is not None:
            location = GeoPoint(latitude=model.latitude, longitude=model.longitude)
        return UserProfile(
            id=model.id,
            role=Role(model.role),
            email=model.email,
            contact_name=model.contact_name,
            phone_number=model.phone_number,
            approved=model.approved,
            active=model.active,
            cylinders_available=model.cylinders_available,
            location=location,
            address=model.address,
            license_number=model.license_number,
            licensee_name_address=model.licensee_name_address,
            license_validity=model.license_validity,
            license_type=model.license_type,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: UserProfile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            role=entity.role.value,
            email=entity.email,
            contact_name=entity.contact_name,
            phone_number=entity.phone_number,
            approved=entity.approved,
            active=entity.active,
            cylinders_available=entity.cylinders_available,
            latitude=entity.location.latitude if entity.location else None,
            longitude=entity.location.longitude if entity.location else None,
            address=entity.address,
            license_number=entity.license_number,
            licensee_name_address=entity.licensee_name_address,
            license_validity=entity.license_validity,
            license_type=entity.license_type,
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
