import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.db.database import Database
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.stats_service import StatsService


@pytest.fixture
async def db():
    """In-memory SQLite store with tables created."""
    database = Database("sqlite:///:memory:", "sqlite")
    await database.connect()
    await database.create_all()
    yield database
    await database.disconnect()


@pytest.fixture
def unreachable_db():
    """Store whose file can never be opened."""
    return Database("sqlite:////nonexistent-dir/ecommerce.db", "sqlite")


@pytest.fixture
def product_service(db):
    return ProductService(db)


@pytest.fixture
def order_service(db):
    return OrderService(db)


@pytest.fixture
def stats_service(db):
    return StatsService(db)


@pytest.fixture
def product_data():
    """Valid product payload (API spelling)."""
    return {
        "name": "Test Laptop",
        "description": "A test laptop",
        "price": 999,
        "category": "Electronics",
        "stock": 10,
    }


@pytest.fixture
async def client(db):
    """Async test client backed by the in-memory store."""
    # Lifespan doesn't run under ASGITransport, install the store directly
    app.state.db = db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
