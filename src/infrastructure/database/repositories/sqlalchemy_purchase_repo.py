"""SQLAlchemy implementation of Purchase repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import GeoPoint
from domain.entities.purchase import Purchase
from infrastructure.database.models import PurchaseModel


class SQLAlchemyPurchaseRepository:
    """SQLAlchemy implementation of IPurchaseRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, purchase: Purchase) -> Purchase:
        """Record a new purchase."""
        model = self._to_model(purchase)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def list_for_buyer(self, buyer_id: UUID) -> list[Purchase]:
        """Get a buyer's purchases, newest first."""
        stmt = (
            select(PurchaseModel)
            .where(PurchaseModel.buyer_id == buyer_id)
            .order_by(PurchaseModel.purchase_date.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_seller(
        self, seller_id: UUID, limit: int | None = None
    ) -> list[Purchase]:
        """Get a seller's orders, newest first."""
        stmt = (
            select(PurchaseModel)
            .where(PurchaseModel.seller_id == seller_id)
            .order_by(PurchaseModel.purchase_date.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: PurchaseModel) -> Purchase:
        """Convert ORM model to domain entity."""
        location = None
        if model.buyer_latitude is not None and model.buyer_longitude is not None:
            location = GeoPoint(latitude=model.buyer_latitude, longitude=model.buyer_longitude)
        return Purchase(
            id=model.id,
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            quantity=model.quantity,
            price_per_cylinder=model.price_per_cylinder,
            status=model.status,
            buyer_email=model.buyer_email,
            buyer_contact_name=model.buyer_contact_name,
            seller_name=model.seller_name,
            payment_card_last4=model.payment_card_last4,
            buyer_address=model.buyer_address,
            buyer_location=location,
            purchase_date=model.purchase_date,
        )

    def _to_model(self, entity: Purchase) -> PurchaseModel:
        """Convert domain entity to ORM model."""
        return PurchaseModel(
            id=entity.id,
            buyer_id=entity.buyer_id,
            seller_id=entity.seller_id,
            quantity=entity.quantity,
            price_per_cylinder=entity.price_per_cylinder,
            total_amount=entity.total_amount,
            status=entity.status,
            buyer_email=entity.buyer_email,
            buyer_contact_name=entity.buyer_contact_name,
            seller_name=entity.seller_name,
            payment_card_last4=entity.payment_card_last4,
            buyer_address=entity.buyer_address,
            buyer_latitude=entity.buyer_location.latitude if entity.buyer_location else None,
            buyer_longitude=entity.buyer_location.longitude if entity.buyer_location else None,
            purchase_date=entity.purchase_date,
        )
