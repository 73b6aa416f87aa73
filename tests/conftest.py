"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.exceptions import EmailInUseError, InvalidCredentialsError
from domain.entities.profile import GeoPoint, Role, UserProfile
from infrastructure.auth.provider import AuthSession, TokenUser
from infrastructure.auth.supabase_provider import SupabaseIdentityProvider
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.payments.gateway import StubPaymentGateway

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key"
TEST_PASSWORD = "Sup3r$ecret"


class FakeIdentityProvider:
    """In-memory identity provider issuing real HS256 tokens."""

    def __init__(self) -> None:
        self._tokens = SupabaseIdentityProvider(
            auth_url="",
            api_key="",
            secret_key=TEST_JWT_SECRET,
            algorithm="HS256",
            expire_minutes=30,
        )
        self.accounts: dict[str, dict[str, Any]] = {}
        self.revoked: set[str] = set()

    def add_account(self, user_id: UUID, email: str, password: str = TEST_PASSWORD) -> None:
        self.accounts[email] = {"id": user_id, "password": password}

    def issue_token(self, user_id: UUID, email: str) -> str:
        return self._tokens.create_token(TokenUser(id=user_id, email=email))

    async def register(self, email: str, password: str, display_name: str) -> TokenUser:
        if email in self.accounts:
            raise EmailInUseError(email)
        user_id = uuid4()
        self.add_account(user_id, email, password)
        return TokenUser(id=user_id, email=email, display_name=display_name)

    async def authenticate(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if not account or account["password"] != password:
            raise InvalidCredentialsError()
        user = TokenUser(id=account["id"], email=email)
        return AuthSession(
            access_token=self._tokens.create_token(user),
            user=user,
            expires_in=1800,
        )

    async def change_password(self, access_token: str, new_password: str) -> None:
        user = await self.validate_token(access_token)
        assert user is not None
        self.accounts[user.email]["password"] = new_password

    async def sign_out(self, access_token: str) -> None:
        self.revoked.add(access_token)

    async def validate_token(self, token: str) -> TokenUser | None:
        if token in self.revoked:
            return None
        return await self._tokens.validate_token(token)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def make_profile(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    identity_provider: FakeIdentityProvider,
) -> Callable[..., Awaitable[UserProfile]]:
    """Insert a profile (and a matching identity) directly into the store."""

    async def _make(role: Role, **fields: Any) -> UserProfile:
        profile_id = fields.pop("id", uuid4())
        email = fields.pop("email", f"{role.value}-{profile_id.hex[:8]}@example.com")
        profile = UserProfile.register(
            id=profile_id,
            role=role,
            email=email,
            contact_name=fields.pop("contact_name", f"Test {role.value.title()}"),
            phone_number=fields.pop("phone_number", "+91 98765 43210"),
        )
        for name, value in fields.items():
            setattr(profile, name, value)

        async with uow_factory() as uow:
            created = await uow.profiles.create(profile)
            await uow.commit()

        identity_provider.add_account(created.id, created.email)
        return created

    return _make


@pytest.fixture
def headers_for(
    identity_provider: FakeIdentityProvider,
) -> Callable[[UserProfile], dict[str, str]]:
    """Authorization headers for a stored profile."""

    def _headers(profile: UserProfile) -> dict[str, str]:
        token = identity_provider.issue_token(profile.id, profile.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def buyer(make_profile: Callable[..., Awaitable[UserProfile]]) -> UserProfile:
    return await make_profile(Role.BUYER, address="12 Park Street")


@pytest.fixture
async def seller(make_profile: Callable[..., Awaitable[UserProfile]]) -> UserProfile:
    """An approved, visible seller at (0, 0) with 5 cylinders."""
    return await make_profile(
        Role.SELLER,
        contact_name="Harbour Oxygen",
        approved=True,
        active=True,
        cylinders_available=5,
        location=GeoPoint(latitude=0.0, longitude=0.0),
    )


@pytest.fixture
async def admin(make_profile: Callable[..., Awaitable[UserProfile]]) -> UserProfile:
    return await make_profile(Role.ADMIN)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    identity_provider: FakeIdentityProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Uses a fresh in-memory SQLite database
    - Validates tokens issued by the fake identity provider
    - Uses the always-accepting payment stub with no retry backoff
    """
    from api.dependencies import auth as auth_deps
    from api.v1 import dependencies as deps
    from domain.services.account_service import AccountService
    from domain.services.activity_service import ActivityService
    from domain.services.admin_service import AdminService
    from domain.services.marketplace_service import MarketplaceService
    from domain.services.profile_service import ProfileService
    from domain.services.purchase_service import PurchaseService
    from domain.services.seller_service import SellerService
    from domain.services.session_service import SessionService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    activity_service = ActivityService(uow_factory)
    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        auth_deps.get_identity_provider: lambda: identity_provider,
        auth_deps.get_session_service: lambda: SessionService(uow_factory, identity_provider),
        deps.get_activity_service: lambda: activity_service,
        deps.get_account_service: lambda: AccountService(
            uow_factory,
            identity_provider,
            activity_service=activity_service,
            allow_admin_registration=False,
        ),
        deps.get_profile_service: lambda: ProfileService(uow_factory),
        deps.get_seller_service: lambda: SellerService(uow_factory, recent_orders_limit=5),
        deps.get_marketplace_service: lambda: MarketplaceService(
            uow_factory, default_radius_km=25.0
        ),
        deps.get_purchase_service: lambda: PurchaseService(
            uow_factory,
            StubPaymentGateway(),
            price_per_cylinder=50,
            max_attempts=3,
            backoff_seconds=0,
        ),
        deps.get_admin_service: lambda: AdminService(
            uow_factory, activity_service=activity_service
        ),
    }
    app.dependency_overrides.update(overrides)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
