"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from quickdrop.app.main import app
from quickdrop.app.db.session import get_db, Base
from quickdrop.app.core.identity import create_identity_token
from quickdrop.app.core.reliability import CircuitBreaker
from quickdrop.app.models.enums import UserRole
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from quickdrop.app.models.rider import Rider
from quickdrop.app.models.rider_enums import RiderStatus
from quickdrop.app.models.user import User
from quickdrop.app.services.payment_gateway import StripePaymentGateway, get_payment_gateway

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

ADMIN_EMAIL = "admin@quickdrop.io"
RIDER_EMAIL = "rider@quickdrop.io"
SENDER_EMAIL = "sender@quickdrop.io"


@pytest.fixture(scope="session")
def gateway():
    """Stripe gateway with a sandbox key; tests patch the Stripe SDK call."""
    return StripePaymentGateway(
        secret_key="sk_test_quickdrop",
        breaker=CircuitBreaker(name="stripe-test", failure_threshold=2, reset_timeout=60),
    )


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(gateway):
    """Apply overrides once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database(gateway):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    gateway.breaker.reset_state()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def auth_headers(email: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {create_identity_token(email, **kwargs)}"}


@pytest.fixture
def token_headers():
    """Bearer headers for an arbitrary email, as the identity provider would issue."""
    return auth_headers


@pytest.fixture
async def admin_headers(db_session):
    db_session.add(User(email=ADMIN_EMAIL, name="Admin", role=UserRole.ADMIN))
    await db_session.commit()
    return auth_headers(ADMIN_EMAIL)


@pytest.fixture
async def sender_headers(db_session):
    db_session.add(User(email=SENDER_EMAIL, name="Sender", role=UserRole.USER))
    await db_session.commit()
    return auth_headers(SENDER_EMAIL)


@pytest.fixture
async def active_rider(db_session):
    """An approved rider in Chattogram whose user account has the rider role."""
    db_session.add(User(email=RIDER_EMAIL, name="Rahim", role=UserRole.RIDER))
    rider = Rider(
        email=RIDER_EMAIL,
        name="Rahim",
        region="Chattogram",
        district="Chattogram",
        status=RiderStatus.ACTIVE,
    )
    db_session.add(rider)
    await db_session.commit()
    await db_session.refresh(rider)
    return rider


@pytest.fixture
def rider_headers(active_rider):
    return auth_headers(RIDER_EMAIL)


@pytest.fixture
def make_parcel(db_session):
    """Insert a parcel directly in the given state."""
    async def _make(**overrides):
        values = {
            "sender_email": SENDER_EMAIL,
            "title": "Documents",
            "cost": 150.0,
            "receiver_region": "Chattogram",
            "payment_status": PaymentStatus.UNPAID,
            "delivery_status": DeliveryStatus.NOT_DELIVERED,
        }
        values.update(overrides)
        parcel = Parcel(**values)
        db_session.add(parcel)
        await db_session.commit()
        await db_session.refresh(parcel)
        return parcel
    return _make


@pytest.fixture
async def assigned_parcel(make_parcel, active_rider):
    return await make_parcel(
        payment_status=PaymentStatus.PAID,
        transaction_id="tx-fixture",
        delivery_status=DeliveryStatus.RIDER_ASSIGNED,
        rider_name=active_rider.name,
        rider_email=active_rider.email,
    )
