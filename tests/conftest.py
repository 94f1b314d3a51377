import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.apis.deps import get_db, get_payment_gateway
from tests.fakes import FakePaymentGateway
from tests.test_db import create_test_engine, create_session_factory, init_test_db, seed_catalog


@pytest.fixture
async def session_factory():
    engine = create_test_engine()
    await init_test_db(engine)
    factory = create_session_factory(engine)
    await seed_catalog(factory)
    yield factory
    await engine.dispose()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
