"""Shared fixtures for unit tests."""

import asyncio
import copy
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import GeoPoint, Role, UserProfile
from domain.entities.purchase import Purchase
from domain.services.session_service import UserSession
from infrastructure.auth.provider import TokenUser


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.purchases = AsyncMock()
        self.activities = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type:
            await self.rollback()


class InMemoryStore:
    """Versioned profile/purchase store with transactional units.

    Writes apply immediately and are undone if the unit exits without
    committing. Each profile write bumps its version, like the SQL store.
    """

    def __init__(self) -> None:
        self.profiles: dict[UUID, UserProfile] = {}
        self.purchases: list[Purchase] = []
        # Block the first N seller reads until all N have happened
        self.hold_seller_reads = 0
        self._seller_reads = 0
        self._reads_done = asyncio.Event()
        # Called with (seller_id) right before each stock decrement
        self.before_decrement: Callable[[UUID], None] | None = None

    def add(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.id] = copy.deepcopy(profile)
        return profile

    def uow(self) -> "InMemoryUnitOfWork":
        return InMemoryUnitOfWork(self)

    async def read(self, profile_id: UUID) -> UserProfile | None:
        profile = self.profiles.get(profile_id)
        snapshot = copy.deepcopy(profile) if profile else None
        if snapshot and snapshot.role is Role.SELLER and self.hold_seller_reads:
            self._seller_reads += 1
            if self._seller_reads >= self.hold_seller_reads:
                self._reads_done.set()
            if self._seller_reads <= self.hold_seller_reads:
                await self._reads_done.wait()
        return snapshot


class _ProfileRepo:
    def __init__(self, uow: "InMemoryUnitOfWork") -> None:
        self._uow = uow
        self._store = uow.store

    async def get(self, id: UUID) -> UserProfile | None:
        return await self._store.read(id)

    async def decrement_stock(self, seller_id: UUID, quantity: int, expected_version: int) -> bool:
        if self._store.before_decrement:
            self._store.before_decrement(seller_id)
        row = self._store.profiles.get(seller_id)
        if (
            row is None
            or row.version != expected_version
            or (row.cylinders_available or 0) < quantity
        ):
            return False
        self._uow.remember(row)
        row.cylinders_available = (row.cylinders_available or 0) - quantity
        row.version += 1
        return True

    async def update_address(self, profile_id: UUID, address: str, expected_version: int) -> bool:
        row = self._store.profiles.get(profile_id)
        if row is None or row.version != expected_version:
            return False
        self._uow.remember(row)
        row.address = address
        row.version += 1
        return True


class _PurchaseRepo:
    def __init__(self, uow: "InMemoryUnitOfWork") -> None:
        self._uow = uow

    async def create(self, purchase: Purchase) -> Purchase:
        self._uow.new_purchases.append(purchase)
        return purchase

    async def list_for_buyer(self, buyer_id: UUID) -> list[Purchase]:
        return [p for p in self._uow.store.purchases if p.buyer_id == buyer_id]


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.profiles = _ProfileRepo(self)
        self.purchases = _PurchaseRepo(self)
        self.activities = AsyncMock()
        self.new_purchases: list[Purchase] = []
        self._undo: dict[UUID, UserProfile] = {}

    def remember(self, row: UserProfile) -> None:
        self._undo.setdefault(row.id, copy.deepcopy(row))

    async def commit(self) -> None:
        self.store.purchases.extend(self.new_purchases)
        self.new_purchases = []
        self._undo = {}

    async def rollback(self) -> None:
        for profile_id, original in self._undo.items():
            self.store.profiles[profile_id] = original
        self.new_purchases = []
        self._undo = {}

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        # Anything not committed is discarded
        await self.rollback()


def make_session(profile: UserProfile, token: str = "token") -> UserSession:
    return UserSession(
        access_token=token,
        identity=TokenUser(id=profile.id, email=profile.email),
        profile=profile,
    )


def make_seller(**fields: Any) -> UserProfile:
    defaults: dict[str, Any] = {
        "role": Role.SELLER,
        "email": "seller@example.com",
        "contact_name": "Harbour Oxygen",
        "approved": True,
        "active": True,
        "cylinders_available": 5,
        "location": GeoPoint(latitude=0.0, longitude=0.0),
    }
    defaults.update(fields)
    return UserProfile(**defaults)


def make_buyer(**fields: Any) -> UserProfile:
    defaults: dict[str, Any] = {
        "role": Role.BUYER,
        "email": "buyer@example.com",
        "contact_name": "Asha Buyer",
        "address": "12 Park Street",
    }
    defaults.update(fields)
    return UserProfile(**defaults)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def buyer_session() -> UserSession:
    return make_session(make_buyer())


@pytest.fixture
def seller_session() -> UserSession:
    return make_session(make_seller())


@pytest.fixture
def admin_session() -> UserSession:
    return make_session(UserProfile(role=Role.ADMIN, email="admin@example.com"))
