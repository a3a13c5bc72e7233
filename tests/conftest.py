import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest
import stripe
from sqlalchemy import func, select

import models.models  # noqa: F401
from core.get_db import build_engine, build_sessionmaker, create_tables
from core.settings import Settings
from fintechs.stripe_client import StripeClient
from models.enums import PaymentMethod, PaymentProvider, PaymentStatus, UnitStatus
from models.models import Lease, Owner, Payment, Tenant, Unit


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'rental_test.db'}"


@pytest.fixture
def test_settings(db_url):
    return Settings(
        DATABASE_URL=db_url,
        CREATE_TABLES=True,
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET="whsec_test_123",
        WEB_BASE_URL="https://app.example.com",
        CURRENCY="eur",
        TIMEZONE="Europe/Rome",
        LATE_GRACE_DAYS=5,
    )


@pytest.fixture
async def engine(db_url):
    engine = build_engine(db_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine, test_settings):
    return build_sessionmaker(engine, test_settings)


@pytest.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest.fixture
async def owner_unit_tenant(db):
    db.add(Owner(id="O1", email="owner@example.com", name="Olivia Owner"))
    await db.flush()
    db.add_all(
        [
            Unit(
                id="U1",
                owner_id="O1",
                address="Via Roma 12",
                city="Milano",
                rooms=3,
                m2=Decimal("75"),
                rent_ask=Decimal("900"),
                status=UnitStatus.VACANT,
            ),
            Tenant(id="T1", owner_id="O1", name="Tom Tenant", email="tenant@example.com"),
        ]
    )
    await db.commit()
    return {"owner_id": "O1", "unit_id": "U1", "tenant_id": "T1"}


@pytest.fixture
def add_lease(db, owner_unit_tenant):
    async def factory(**overrides):
        values = {
            "id": "L1",
            "unit_id": "U1",
            "tenant_id": "T1",
            "start_date": date(2025, 1, 1),
            "end_date": None,
            "rent": Decimal("1234.50"),
            "due_day": 5,
            "payment_method": PaymentMethod.SEPA_MANDATE,
            "mandate_ref": "MND-ABC123",
            "tenant_email": "tenant@example.com",
        }
        values.update(overrides)
        lease = Lease(**values)
        db.add(lease)
        await db.commit()
        return lease

    return factory


@pytest.fixture
def add_payment(db, add_lease):
    async def factory(**overrides):
        lease_id = overrides.pop("lease_id", "L1")
        if await db.get(Lease, lease_id) is None:
            await add_lease(id=lease_id)
        values = {
            "id": "P1",
            "lease_id": lease_id,
            "amount": Decimal("500.00"),
            "due_date": date(2025, 3, 5),
            "status": PaymentStatus.PENDING,
            "provider": PaymentProvider.MOCK,
        }
        values.update(overrides)
        payment = Payment(**values)
        db.add(payment)
        await db.commit()
        return payment

    return factory


@pytest.fixture
def fetch_payment(sessionmaker):
    async def fetch(payment_id: str) -> Payment | None:
        async with sessionmaker() as session:
            return await session.get(Payment, payment_id)

    return fetch


@pytest.fixture
def count_rows(sessionmaker):
    async def count(model) -> int:
        async with sessionmaker() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return count


class StripeStub(stripe.HTTPClient):
    """Records checkout requests and answers like the Checkout Sessions API."""

    name = "stub"

    def __init__(self, status_code: int = 200, body: dict | None = None, delay: float = 0):
        super().__init__()
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.delay = delay
        self.body = body or {
            "id": "cs_test_1",
            "object": "checkout.session",
            "url": "https://checkout.stripe.com/c/pay/cs_test_1",
        }

    async def request_async(self, method, url, headers, post_data=None):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.requests.append(
            httpx.Request(method.upper(), url, headers=headers, content=post_data or "")
        )
        return json.dumps(self.body).encode(), self.status_code, {}

    async def close_async(self):
        pass

    @property
    def last_form(self) -> dict:
        return dict(httpx.QueryParams(self.requests[-1].content.decode()))


@pytest.fixture
def stripe_stub():
    return StripeStub()


@pytest.fixture
def stripe_client(test_settings, stripe_stub):
    return StripeClient(test_settings, http_client=stripe_stub)


@pytest.fixture
def make_stripe_client(test_settings):
    def factory(settings: Settings | None = None, **stub_kwargs):
        stub = StripeStub(**stub_kwargs)
        client = StripeClient(settings or test_settings, http_client=stub)
        return client, stub

    return factory
