from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

T = TypeVar("T")

# Column capacities: Integer is 32-bit, prices are Numeric(10, 2), totals Numeric(12, 2)
MAX_INT = 2**31 - 1
PRICE_DIGITS = 10
TOTAL_DIGITS = 12
MONEY_PLACES = 2


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InputModel(CamelModel):
    """Closed input contract: unknown keys are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ReadModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="json", check_fields=False)
    def serialize_utc(self, value: datetime) -> datetime:
        """Timestamps are stored as naive UTC; emit them with an explicit offset."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ApiListResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: list[T]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


def strip_text(value: Any) -> Any:
    """Trim surrounding whitespace from text input."""
    if isinstance(value, str):
        return value.strip()
    return value


def reject_null(value: Any, field_name: str) -> Any:
    """Partial updates may omit a field but not null it out."""
    if value is None:
        raise PydanticCustomError("missing", "{field} cannot be null", {"field": field_name})
    return value
