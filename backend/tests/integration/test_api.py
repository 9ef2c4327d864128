"""
Integration tests against the database configured by DATABASE_URL.
Skipped when that database can't be reached.
"""
import uuid

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.db.database import Database


@pytest.fixture
async def live_db():
    """Connect to the configured database before each test, disconnect after."""
    database = Database()
    if not await database.is_reachable():
        await database.disconnect()
        pytest.skip("Configured database is not reachable")
    await database.create_all()
    yield database
    await database.disconnect()


@pytest.fixture
async def live_client(live_db):
    app.state.db = live_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


class TestAPIIntegration:
    """Integration tests for API with real database."""

    @pytest.mark.asyncio
    async def test_health_connected(self, live_client):
        """Test health reports the live database as connected."""
        response = await live_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_product_lifecycle(self, live_client):
        """Test create, update, delete against the real store."""
        name = f"Integration {uuid.uuid4().hex[:8]}"
        created = await live_client.post("/api/products", json={
            "name": name,
            "description": "Created by integration tests",
            "price": 12.5,
            "category": "Other",
        })
        assert created.status_code == 201
        product_id = created.json()["data"]["id"]

        updated = await live_client.put(f"/api/products/{product_id}", json={"stock": 7})
        assert updated.json()["data"]["stock"] == 7

        deleted = await live_client.delete(f"/api/products/{product_id}")
        assert deleted.status_code == 200
        again = await live_client.delete(f"/api/products/{product_id}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_order_and_stats(self, live_client):
        """Test an order shows up in the dashboard statistics."""
        before = (await live_client.get("/api/stats")).json()["data"]

        created = await live_client.post("/api/orders", json={
            "customerName": "Integration",
            "customerEmail": "integration@example.com",
            "shippingAddress": "Test Lane 1",
            "lineItems": [{"productId": uuid.uuid4().hex, "quantity": 2, "unitPrice": 25}],
        })
        assert created.status_code == 201
        order = created.json()["data"]

        after = (await live_client.get("/api/stats")).json()["data"]
        assert after["orders"] == before["orders"] + 1
        assert after["revenue"] == pytest.approx(before["revenue"] + 50)
        assert order["orderNumber"] in [o["orderNumber"] for o in after["recentOrders"]]
