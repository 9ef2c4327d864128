from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from app.config import Config
from app.schemas.common import (
    MAX_INT,
    MONEY_PLACES,
    PRICE_DIGITS,
    InputModel,
    ReadModel,
    reject_null,
    strip_text,
)


class Category(str, Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME = "Home"
    SPORTS = "Sports"
    OTHER = "Other"


# API sort key -> Product attribute
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
    "price": "price",
    "category": "category",
    "stock": "stock",
    "rating": "rating",
    "reviews": "reviews",
    "featured": "featured",
}


class ProductCreate(InputModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=PRICE_DIGITS, decimal_places=MONEY_PLACES)
    category: Category
    stock: int = Field(0, ge=0, le=MAX_INT)
    image_url: str = Field(Config.DEFAULT_IMAGE_URL, min_length=1, max_length=2048)
    rating: Decimal = Field(Decimal("0"), ge=0, le=5, max_digits=3, decimal_places=MONEY_PLACES)
    reviews: int = Field(0, ge=0, le=MAX_INT)
    featured: bool = False

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return strip_text(v)


class ProductUpdate(InputModel):
    """Partial update: only the fields present are validated and applied."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, max_digits=PRICE_DIGITS, decimal_places=MONEY_PLACES)
    category: Category | None = None
    stock: int | None = Field(None, ge=0, le=MAX_INT)
    image_url: str | None = Field(None, min_length=1, max_length=2048)
    rating: Decimal | None = Field(None, ge=0, le=5, max_digits=3, decimal_places=MONEY_PLACES)
    reviews: int | None = Field(None, ge=0, le=MAX_INT)
    featured: bool | None = None

    @field_validator("*", mode="before")
    @classmethod
    def no_nulls(cls, v, info: ValidationInfo):
        return strip_text(reject_null(v, info.field_name))


class ProductFilter(InputModel):
    category: Category | None = None
    featured: bool | None = None
    sort: str = "-createdAt"
    limit: int = Field(Config.DEFAULT_PRODUCT_LIMIT, gt=0)

    @field_validator("sort")
    @classmethod
    def known_sort_fields(cls, v: str) -> str:
        keys = v.replace(",", " ").split()
        if not keys:
            raise PydanticCustomError("missing", "sort cannot be empty")
        for key in keys:
            if sort_column(key.lstrip("-")) is None:
                raise PydanticCustomError(
                    "enum",
                    "Unknown sort field '{field}'",
                    {"field": key.lstrip("-")}
                )
        return " ".join(keys)

    def sort_keys(self) -> list[tuple[str, bool]]:
        """Parsed sort as (attribute, descending) pairs."""
        return [(sort_column(key.lstrip("-")), key.startswith("-")) for key in self.sort.split()]


def sort_column(key: str) -> str | None:
    """Resolve a camelCase or snake_case sort key to a Product attribute."""
    if key in SORT_FIELDS:
        return SORT_FIELDS[key]
    if key in SORT_FIELDS.values():
        return key
    return None


class ProductRead(ReadModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    stock: int
    image_url: str
    rating: float
    reviews: int
    featured: bool
    created_at: datetime
    updated_at: datetime
