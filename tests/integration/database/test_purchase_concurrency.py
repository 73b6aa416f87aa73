"""Concurrent purchases against the SQL store."""

import asyncio
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.exceptions import StockChangedError
from domain.entities.profile import GeoPoint, Role, UserProfile
from domain.entities.purchase import Purchase
from domain.services.purchase_service import PurchaseRequest, PurchaseService
from domain.services.session_service import UserSession
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, ProfileModel, PurchaseModel
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.payments.gateway import PaymentCard, StubPaymentGateway

CARD = PaymentCard(card_number="4111 1111 1111 1111", expiration_date="12/29", cvv="123")


class SellerReadGate:
    """Hold the first ``parties`` seller reads until all of them have happened."""

    def __init__(self, seller_id: UUID, parties: int = 2) -> None:
        self.seller_id = seller_id
        self._waiting = parties
        self._released = asyncio.Event()

    async def arrive(self, id: UUID) -> None:
        if id != self.seller_id or self._waiting == 0:
            return
        self._waiting -= 1
        if self._waiting == 0:
            self._released.set()
        await asyncio.wait_for(self._released.wait(), timeout=5)


class GatedProfiles:
    def __init__(self, repo: SQLAlchemyProfileRepository, gate: SellerReadGate) -> None:
        self._repo = repo
        self._gate = gate

    async def get(self, id: UUID) -> UserProfile | None:
        profile = await self._repo.get(id)
        await self._gate.arrive(id)
        return profile

    def __getattr__(self, name: str) -> Any:
        return getattr(self._repo, name)


class GatedUnitOfWork(SQLAlchemyUnitOfWork):
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], gate: SellerReadGate
    ) -> None:
        super().__init__(session_factory)
        self._gate = gate

    @property
    def profiles(self) -> Any:
        return GatedProfiles(super().profiles, self._gate)


@pytest.fixture
async def file_session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def _store(
    session_factory: async_sessionmaker[AsyncSession], role: Role, **fields: Any
) -> UserProfile:
    profile_id = uuid4()
    profile = UserProfile.register(
        id=profile_id,
        role=role,
        email=f"{role.value}-{profile_id.hex[:8]}@example.com",
        contact_name=f"Test {role.value.title()}",
        phone_number="+91 98765 43210",
    )
    for name, value in fields.items():
        setattr(profile, name, value)
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        created = await uow.profiles.create(profile)
        await uow.commit()
    return created


def _session(profile: UserProfile) -> UserSession:
    return UserSession(
        access_token="token",
        identity=TokenUser(id=profile.id, email=profile.email),
        profile=profile,
    )


def _service(uow_factory: Callable[[], SQLAlchemyUnitOfWork]) -> PurchaseService:
    return PurchaseService(
        uow_factory,
        StubPaymentGateway(),
        price_per_cylinder=50,
        max_attempts=3,
        backoff_seconds=0,
    )


async def _profile_row(
    session_factory: async_sessionmaker[AsyncSession], profile_id: UUID
) -> ProfileModel:
    async with session_factory() as session:
        result = await session.execute(select(ProfileModel).where(ProfileModel.id == profile_id))
        return result.scalar_one()


async def _purchase_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(PurchaseModel))
        return result.scalar_one()


@pytest.fixture
async def seller(file_session_factory: async_sessionmaker[AsyncSession]) -> UserProfile:
    return await _store(
        file_session_factory,
        Role.SELLER,
        approved=True,
        active=True,
        cylinders_available=5,
        location=GeoPoint(latitude=0.0, longitude=0.0),
    )


class TestConcurrentPurchases:
    @pytest.mark.asyncio
    async def test_only_one_of_two_competing_buyers_gets_the_stock(
        self, file_session_factory: async_sessionmaker[AsyncSession], seller: UserProfile
    ) -> None:
        first = await _store(file_session_factory, Role.BUYER, address="1 First Lane")
        second = await _store(file_session_factory, Role.BUYER, address="2 Second Lane")
        gate = SellerReadGate(seller.id)
        service = _service(lambda: GatedUnitOfWork(file_session_factory, gate))
        request = PurchaseRequest(seller_id=seller.id, quantity=3, card=CARD)

        results = await asyncio.gather(
            service.purchase(_session(first), request),
            service.purchase(_session(second), request),
            return_exceptions=True,
        )

        completed = [r for r in results if isinstance(r, Purchase)]
        rejected = [r for r in results if isinstance(r, StockChangedError)]
        assert len(completed) == 1
        assert len(rejected) == 1
        assert rejected[0].details["available"] == 2
        row = await _profile_row(file_session_factory, seller.id)
        assert row.cylinders_available == 2
        assert row.version == seller.version + 1
        assert await _purchase_count(file_session_factory) == 1

    @pytest.mark.asyncio
    async def test_both_succeed_when_stock_covers_them(
        self, file_session_factory: async_sessionmaker[AsyncSession], seller: UserProfile
    ) -> None:
        buyer = await _store(file_session_factory, Role.BUYER, address="1 First Lane")
        gate = SellerReadGate(seller.id)
        service = _service(lambda: GatedUnitOfWork(file_session_factory, gate))
        session = _session(buyer)

        results = await asyncio.gather(
            service.purchase(
                session,
                PurchaseRequest(
                    seller_id=seller.id, quantity=2, card=CARD, delivery_address="7 North Road"
                ),
            ),
            service.purchase(
                session,
                PurchaseRequest(
                    seller_id=seller.id, quantity=2, card=CARD, delivery_address="9 South Road"
                ),
            ),
            return_exceptions=True,
        )

        assert all(isinstance(r, Purchase) for r in results), results
        seller_row = await _profile_row(file_session_factory, seller.id)
        buyer_row = await _profile_row(file_session_factory, buyer.id)
        assert seller_row.cylinders_available == 1
        assert seller_row.version == seller.version + 2
        assert buyer_row.address in {"7 North Road", "9 South Road"}
        assert buyer_row.version == buyer.version + 2
        assert await _purchase_count(file_session_factory) == 2
