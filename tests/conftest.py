from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager, build_tortoise_config
from bizops.main import app
from bizops.models import InventoryItem


@pytest_asyncio.fixture
async def db():
    """A connected manager over a fresh in-memory SQLite database."""
    manager = ConnectionManager(build_tortoise_config("sqlite://:memory:"), retry_delay=0, max_attempts=1, generate_schemas=True)
    assert await manager.connect()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def stapler(db):
    """stock=10, price=2.50, reorder at 2."""
    return await InventoryItem.create(
        product_name="Stapler",
        stock_quantity=10,
        reorder_threshold=2,
        price=Decimal("2.50"),
    )


@pytest_asyncio.fixture
async def api(db):
    """HTTP client running the app in the test's event loop against the SQLite database."""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
