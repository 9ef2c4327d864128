import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from app.db.database import Database, utcnow
from app.db.query_builder import build_product_query
from app.errors import ErrorType
from app.exceptions import AppException
from app.models import Product
from app.schemas.product import ProductCreate, ProductFilter, ProductUpdate
from app.validation import parse_identifier, validate_input

logger = logging.getLogger(__name__)

# Stored as Numeric columns
DECIMAL_FIELDS = {"price", "rating"}


def to_decimal(value: float | Decimal) -> Decimal:
    return Decimal(str(value))


class ProductService:
    """Catalog operations over an explicit store handle."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, data: ProductCreate | Mapping[str, Any]) -> Product:
        """Validate and persist a new product.

        Raises:
            AppException: VALIDATION_ERROR on the first constraint violation
        """
        payload = validate_input(ProductCreate, data)
        now = utcnow()
        product = Product(
            name=payload.name,
            description=payload.description,
            price=to_decimal(payload.price),
            category=payload.category.value,
            stock=payload.stock,
            image_url=payload.image_url,
            rating=to_decimal(payload.rating),
            reviews=payload.reviews,
            featured=payload.featured,
            created_at=now,
            updated_at=now,
        )
        async with self.db.session() as session:
            session.add(product)
            await session.commit()
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    async def get(self, product_id: str) -> Product:
        """Fetch one product.

        Raises:
            AppException: INVALID_IDENTIFIER or NOT_FOUND
        """
        key = parse_identifier(product_id)
        async with self.db.session() as session:
            product = await session.get(Product, key)
        if product is None:
            raise AppException(ErrorType.NOT_FOUND, "Product not found")
        return product

    async def list(self, filters: ProductFilter | Mapping[str, Any] | None = None) -> list[Product]:
        """List products matching all supplied filters, sorted and limited."""
        filters = validate_input(ProductFilter, filters or {})
        async with self.db.session() as session:
            result = await session.execute(build_product_query(filters))
            return list(result.scalars().all())

    async def update(self, product_id: str, data: ProductUpdate | Mapping[str, Any]) -> Product:
        """Apply a partial update; only present fields are validated."""
        key = parse_identifier(product_id)
        payload = validate_input(ProductUpdate, data)
        changes = payload.model_dump(exclude_unset=True)

        async with self.db.session() as session:
            product = await session.get(Product, key)
            if product is None:
                raise AppException(ErrorType.NOT_FOUND, "Product not found")

            for field, value in changes.items():
                if field in DECIMAL_FIELDS:
                    value = to_decimal(value)
                elif field == "category":
                    value = value.value
                setattr(product, field, value)
            # Never move updated_at backwards, even if the clock does
            product.updated_at = max(utcnow(), product.updated_at)
            await session.commit()

        logger.info(f"Updated product {key}: {sorted(changes)}")
        return product

    async def delete(self, product_id: str) -> None:
        """Remove a product. Orders referencing it are left untouched.

        Raises:
            AppException: NOT_FOUND if absent, including on a repeated delete
        """
        key = parse_identifier(product_id)
        async with self.db.session() as session:
            product = await session.get(Product, key)
            if product is None:
                raise AppException(ErrorType.NOT_FOUND, "Product not found")
            await session.delete(product)
            await session.commit()
        logger.info(f"Deleted product {key}")

    async def get_many(self, product_ids: set[str]) -> dict[str, Product]:
        """Products by id for the given ids; unknown or malformed ids are skipped."""
        keys = set()
        for product_id in product_ids:
            try:
                keys.add(parse_identifier(product_id))
            except AppException:
                continue
        if not keys:
            return {}
        async with self.db.session() as session:
            result = await session.execute(select(Product).where(Product.id.in_(keys)))
            return {p.id: p for p in result.scalars().all()}
