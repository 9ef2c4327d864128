import logging
import secrets
import string
import time
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from app.config import Config
from app.db.database import Database, utcnow
from app.errors import ErrorType, ValidationKind
from app.exceptions import AppException
from app.models import Order, OrderLineItem, Product
from app.schemas.common import MONEY_PLACES, TOTAL_DIGITS
from app.schemas.order import OrderCreate, OrderRead, OrderStatus, OrderStatusUpdate
from app.schemas.product import ProductRead
from app.services.product_service import ProductService, to_decimal
from app.validation import parse_identifier, validate_input

logger = logging.getLogger(__name__)

SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 9

# Largest value orders.total_amount can hold
MAX_TOTAL = Decimal(10) ** (TOTAL_DIGITS - MONEY_PLACES) - Decimal("0.01")


def generate_order_number(prefix: str | None = None) -> str:
    """Prefix + epoch milliseconds + random base-36 suffix.

    Unique in practice, not guaranteed and not monotonic.
    """
    prefix = Config.ORDER_NUMBER_PREFIX if prefix is None else prefix
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}{millis}-{suffix}"


class OrderService:
    """Order operations over an explicit store handle."""

    def __init__(self, db: Database):
        self.db = db
        self.products = ProductService(db)

    async def create(self, data: OrderCreate | Mapping[str, Any]) -> Order:
        """Create an order with snapshotted line items.

        Line items without a unit price take the product's current price
        and name, frozen at this point. Nothing is persisted if any line
        item fails.

        Raises:
            AppException: VALIDATION_ERROR, INVALID_IDENTIFIER, NOT_FOUND
        """
        payload = validate_input(OrderCreate, data)

        product_ids = [parse_identifier(item.product_id) for item in payload.line_items]
        to_resolve = {pid for pid, item in zip(product_ids, payload.line_items) if item.unit_price is None}
        current = await self.products.get_many(to_resolve) if to_resolve else {}

        line_items = []
        computed_total = Decimal("0")
        for position, (product_id, item) in enumerate(zip(product_ids, payload.line_items)):
            name = item.name
            if item.unit_price is None:
                product = current.get(product_id)
                if product is None:
                    raise AppException(ErrorType.NOT_FOUND, f"Product {product_id} not found")
                unit_price = Decimal(product.price)
                name = name or product.name
            else:
                unit_price = to_decimal(item.unit_price)

            computed_total += unit_price * item.quantity
            line_items.append(OrderLineItem(
                position=position,
                product_id=product_id,
                product_name=name,
                quantity=item.quantity,
                unit_price=unit_price,
            ))

        if payload.total_amount is None:
            if computed_total > MAX_TOTAL:
                raise AppException(
                    ErrorType.VALIDATION_ERROR,
                    f"totalAmount: line item sum {computed_total} exceeds {MAX_TOTAL}",
                    ValidationKind.OUT_OF_RANGE,
                )
            total = computed_total
        else:
            total = to_decimal(payload.total_amount)
            if total != computed_total:
                logger.warning(f"Order total {total} differs from line item sum {computed_total}")

        now = utcnow()
        order = Order(
            order_number=generate_order_number(),
            total_amount=total,
            status=OrderStatus.PENDING.value,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            shipping_address=payload.shipping_address,
            created_at=now,
            updated_at=now,
            line_items=line_items,
        )
        async with self.db.session() as session:
            session.add(order)
            await session.commit()

        logger.info(f"Created order {order.order_number} ({len(line_items)} items, total {total})")
        return order

    async def get(self, order_id: str) -> OrderRead:
        """Fetch one order with line items resolved to current product data."""
        key = parse_identifier(order_id)
        async with self.db.session() as session:
            order = await session.get(Order, key)
        if order is None:
            raise AppException(ErrorType.NOT_FOUND, "Order not found")
        resolved = await self.resolve([order])
        return resolved[0]

    async def resolve(self, orders: list[Order]) -> list[OrderRead]:
        """Join line items to current product data for display."""
        product_ids = {item.product_id for order in orders for item in order.line_items}
        products: dict[str, Product] = await self.products.get_many(product_ids) if product_ids else {}

        resolved = []
        for order in orders:
            view = OrderRead.model_validate(order)
            for item_view in view.line_items:
                product = products.get(item_view.product_id)
                if product is not None:
                    item_view.product = ProductRead.model_validate(product)
            resolved.append(view)
        return resolved

    async def list(self) -> list[OrderRead]:
        """Most recent orders first, capped at MAX_ORDER_LIST."""
        stmt = select(Order).order_by(Order.created_at.desc()).limit(Config.MAX_ORDER_LIST)
        async with self.db.session() as session:
            result = await session.execute(stmt)
            orders = list(result.scalars().all())
        return await self.resolve(orders)

    async def update_status(self, order_id: str, data: OrderStatusUpdate | Mapping[str, Any]) -> Order:
        """Set a new status. Any status may move to any other."""
        key = parse_identifier(order_id)
        payload = validate_input(OrderStatusUpdate, data)

        async with self.db.session() as session:
            order = await session.get(Order, key)
            if order is None:
                raise AppException(ErrorType.NOT_FOUND, "Order not found")
            previous = order.status
            order.status = payload.status.value
            order.updated_at = max(utcnow(), order.updated_at)
            await session.commit()

        logger.info(f"Order {order.order_number} status {previous} -> {order.status}")
        return order

