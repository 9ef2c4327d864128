import uuid
from decimal import Decimal

import pytest

from app.errors import ErrorType, ValidationKind
from app.exceptions import AppException


class TestCreateProduct:
    """Tests for ProductService.create."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, product_service, product_data):
        """Test new products get an id and equal timestamps."""
        product = await product_service.create(product_data)

        assert len(product.id) == 32
        assert product.name == "Test Laptop"
        assert product.price == Decimal("999")
        assert product.created_at == product.updated_at

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, product_service, product_data):
        """Test defaults for optional fields."""
        product = await product_service.create(product_data)

        assert product.featured is False
        assert product.reviews == 0
        assert product.rating == 0
        assert product.image_url == "https://via.placeholder.com/300"

    @pytest.mark.asyncio
    async def test_create_is_persisted(self, product_service, product_data):
        """Test created product can be fetched back."""
        product = await product_service.create(product_data)
        fetched = await product_service.get(product.id)
        assert fetched.name == product.name
        assert fetched.category == "Electronics"

    @pytest.mark.asyncio
    async def test_create_rejects_negative_price(self, product_service, product_data):
        """Test validation failure persists nothing."""
        product_data["price"] = -5

        with pytest.raises(AppException) as exc:
            await product_service.create(product_data)

        assert exc.value.error_type == ErrorType.VALIDATION_ERROR
        assert exc.value.kind == ValidationKind.OUT_OF_RANGE
        assert await product_service.list() == []


    @pytest.mark.asyncio
    async def test_price_same_after_read_back(self, product_service, product_data):
        """Test the price returned by create is the one stored."""
        product_data["price"] = 19.99

        product = await product_service.create(product_data)
        fetched = await product_service.get(product.id)

        assert product.price == Decimal("19.99")
        assert fetched.price == product.price

    @pytest.mark.asyncio
    async def test_create_rejects_sub_cent_price(self, product_service, product_data):
        """Test extra precision is rejected instead of rounded."""
        product_data["price"] = 10.999

        with pytest.raises(AppException) as exc:
            await product_service.create(product_data)

        assert exc.value.kind == ValidationKind.OUT_OF_RANGE


class TestGetProduct:
    """Tests for ProductService.get."""

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, product_service):
        """Test well-formed but unknown id."""
        with pytest.raises(AppException) as exc:
            await product_service.get(uuid.uuid4().hex)
        assert exc.value.error_type == ErrorType.NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, product_service):
        """Test malformed id is distinct from not found."""
        with pytest.raises(AppException) as exc:
            await product_service.get("12345")
        assert exc.value.error_type == ErrorType.INVALID_IDENTIFIER

    @pytest.mark.asyncio
    async def test_get_accepts_hyphenated_id(self, product_service, product_data):
        """Test canonical UUID spelling resolves too."""
        product = await product_service.create(product_data)
        fetched = await product_service.get(str(uuid.UUID(product.id)))
        assert fetched.id == product.id


class TestListProducts:
    """Tests for ProductService.list."""

    async def seed(self, product_service):
        rows = [
            ("Phone", "Electronics", 500, True),
            ("Laptop", "Electronics", 1500, False),
            ("Tablet", "Electronics", 300, True),
            ("Novel", "Books", 15, False),
            ("Shirt", "Clothing", 25, True),
        ]
        for name, category, price, featured in rows:
            await product_service.create({
                "name": name,
                "description": f"{name} description",
                "category": category,
                "price": price,
                "featured": featured,
            })

    @pytest.mark.asyncio
    async def test_list_empty(self, product_service):
        """Test empty catalog."""
        assert await product_service.list() == []

    @pytest.mark.asyncio
    async def test_filter_by_category(self, product_service):
        """Test category filter returns only that category."""
        await self.seed(product_service)

        products = await product_service.list({"category": "Electronics"})

        assert len(products) == 3
        assert all(p.category == "Electronics" for p in products)

    @pytest.mark.asyncio
    async def test_limit(self, product_service):
        """Test limit truncates the result."""
        await self.seed(product_service)
        products = await product_service.list({"limit": 2})
        assert len(products) == 2

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, product_service):
        """Test category and featured both apply."""
        await self.seed(product_service)

        products = await product_service.list({"category": "Electronics", "featured": True})

        assert sorted(p.name for p in products) == ["Phone", "Tablet"]

    @pytest.mark.asyncio
    async def test_featured_false(self, product_service):
        """Test featured=false is a constraint, not an absent filter."""
        await self.seed(product_service)
        products = await product_service.list({"featured": "false"})
        assert sorted(p.name for p in products) == ["Laptop", "Novel"]

    @pytest.mark.asyncio
    async def test_sort_by_price(self, product_service):
        """Test ascending and descending sort."""
        await self.seed(product_service)

        ascending = await product_service.list({"sort": "price"})
        descending = await product_service.list({"sort": "-price"})

        assert [p.name for p in ascending] == ["Novel", "Shirt", "Tablet", "Phone", "Laptop"]
        assert [p.name for p in descending] == ["Laptop", "Phone", "Tablet", "Shirt", "Novel"]

    @pytest.mark.asyncio
    async def test_sort_multiple_keys(self, product_service):
        """Test secondary sort key breaks ties."""
        await self.seed(product_service)

        products = await product_service.list({"sort": "category,-price"})

        assert [p.name for p in products] == ["Novel", "Shirt", "Laptop", "Phone", "Tablet"]

    @pytest.mark.asyncio
    async def test_default_sort_newest_first(self, product_service):
        """Test default order is createdAt descending."""
        await self.seed(product_service)
        products = await product_service.list()
        created = [p.created_at for p in products]
        assert created == sorted(created, reverse=True)


class TestUpdateProduct:
    """Tests for ProductService.update."""

    @pytest.mark.asyncio
    async def test_update_fields(self, product_service, product_data):
        """Test partial update changes only given fields."""
        product = await product_service.create(product_data)

        updated = await product_service.update(product.id, {"price": 899.5, "featured": True})

        assert updated.price == Decimal("899.5")
        assert updated.featured is True
        assert updated.name == "Test Laptop"
        assert updated.stock == 10

    @pytest.mark.asyncio
    async def test_update_refreshes_updated_at(self, product_service, product_data):
        """Test updatedAt never goes backwards and createdAt is kept."""
        product = await product_service.create(product_data)

        first = await product_service.update(product.id, {"stock": 3})
        second = await product_service.update(product.id, {"stock": 4})

        assert first.created_at == product.created_at
        assert first.updated_at >= product.updated_at
        assert second.updated_at >= first.updated_at

    @pytest.mark.asyncio
    async def test_update_validates(self, product_service, product_data):
        """Test invalid values are rejected and nothing changes."""
        product = await product_service.create(product_data)

        with pytest.raises(AppException) as exc:
            await product_service.update(product.id, {"rating": 7})

        assert exc.value.kind == ValidationKind.OUT_OF_RANGE
        assert (await product_service.get(product.id)).rating == 0

    @pytest.mark.asyncio
    async def test_update_unknown(self, product_service):
        """Test update of a missing product."""
        with pytest.raises(AppException) as exc:
            await product_service.update(uuid.uuid4().hex, {"stock": 1})
        assert exc.value.error_type == ErrorType.NOT_FOUND


class TestDeleteProduct:
    """Tests for ProductService.delete."""

    @pytest.mark.asyncio
    async def test_delete_twice(self, product_service, product_data):
        """Test second delete fails with NOT_FOUND."""
        product = await product_service.create(product_data)

        await product_service.delete(product.id)

        with pytest.raises(AppException) as exc:
            await product_service.delete(product.id)
        assert exc.value.error_type == ErrorType.NOT_FOUND

    @pytest.mark.asyncio
    async def test_deleted_product_is_gone(self, product_service, product_data):
        """Test get after delete."""
        product = await product_service.create(product_data)
        await product_service.delete(product.id)

        with pytest.raises(AppException) as exc:
            await product_service.get(product.id)
        assert exc.value.error_type == ErrorType.NOT_FOUND


class TestStoreUnavailable:
    """Tests for driver failures."""

    @pytest.mark.asyncio
    async def test_unreachable_store(self, unreachable_db):
        """Test driver errors surface as STORE_UNAVAILABLE."""
        from app.services.product_service import ProductService

        service = ProductService(unreachable_db)
        try:
            with pytest.raises(AppException) as exc:
                await service.get(uuid.uuid4().hex)
            assert exc.value.error_type == ErrorType.STORE_UNAVAILABLE
        finally:
            await unreachable_db.disconnect()
