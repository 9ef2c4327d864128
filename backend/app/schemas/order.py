from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field, field_validator

from app.schemas.common import (
    MAX_INT,
    MONEY_PLACES,
    PRICE_DIGITS,
    TOTAL_DIGITS,
    InputModel,
    ReadModel,
    strip_text,
)
from app.schemas.product import ProductRead


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class LineItemCreate(InputModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0, le=MAX_INT)
    unit_price: Decimal | None = Field(None, ge=0, max_digits=PRICE_DIGITS, decimal_places=MONEY_PLACES)
    name: str | None = Field(None, max_length=255)


class OrderCreate(InputModel):
    line_items: list[LineItemCreate] = Field(min_length=1)
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: str = Field(min_length=1, max_length=255)
    shipping_address: str = Field(min_length=1)
    total_amount: Decimal | None = Field(None, ge=0, max_digits=TOTAL_DIGITS, decimal_places=MONEY_PLACES)

    @field_validator("customer_name", "customer_email", "shipping_address", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return strip_text(v)


class OrderStatusUpdate(InputModel):
    status: OrderStatus


class LineItemRead(ReadModel):
    product_id: str
    name: str | None = Field(None, validation_alias="product_name")
    quantity: int
    unit_price: float
    # Current product data, joined at read time; None if the product is gone
    product: ProductRead | None = None


class OrderRead(ReadModel):
    id: str
    order_number: str
    line_items: list[LineItemRead]
    total_amount: float
    status: str
    customer_name: str
    customer_email: str
    shipping_address: str
    created_at: datetime
    updated_at: datetime


class OrderSummary(ReadModel):
    order_number: str
    total_amount: float
    status: str
    created_at: datetime
