"""
Boundary validation: turns pydantic errors into typed AppExceptions.
"""
import uuid
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from app.errors import ErrorType, ValidationKind
from app.exceptions import AppException

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type -> validation kind
KIND_MAP = {
    "missing": ValidationKind.MISSING_FIELD,
    "string_too_short": ValidationKind.MISSING_FIELD,
    "too_short": ValidationKind.MISSING_FIELD,
    "greater_than": ValidationKind.OUT_OF_RANGE,
    "greater_than_equal": ValidationKind.OUT_OF_RANGE,
    "less_than": ValidationKind.OUT_OF_RANGE,
    "less_than_equal": ValidationKind.OUT_OF_RANGE,
    "string_too_long": ValidationKind.OUT_OF_RANGE,
    "decimal_max_digits": ValidationKind.OUT_OF_RANGE,
    "decimal_max_places": ValidationKind.OUT_OF_RANGE,
    "decimal_whole_digits": ValidationKind.OUT_OF_RANGE,
    "enum": ValidationKind.INVALID_ENUM,
    "literal_error": ValidationKind.INVALID_ENUM,
    "extra_forbidden": ValidationKind.UNKNOWN_FIELD,
}

# FastAPI prefixes error locations with the request part
REQUEST_PARTS = {"body", "query", "path"}


def _field_name(loc: tuple) -> str:
    parts = list(loc)
    if parts and parts[0] in REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or "input"


def error_from_details(errors: list[dict]) -> AppException:
    """Build a VALIDATION_ERROR from the first entry of a pydantic error list."""
    if not errors:
        return AppException(ErrorType.VALIDATION_ERROR, "Invalid input", ValidationKind.INVALID_TYPE)

    first = errors[0]
    kind = KIND_MAP.get(first.get("type"), ValidationKind.INVALID_TYPE)
    field = _field_name(tuple(first.get("loc", ())))
    return AppException(ErrorType.VALIDATION_ERROR, f"{field}: {first.get('msg')}", kind)


def validate_input(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """Validate raw input against an input model.

    Already-validated model instances pass through unchanged.

    Raises:
        AppException: VALIDATION_ERROR describing the first violation
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise error_from_details(e.errors()) from e


def parse_identifier(value: Any) -> str:
    """Normalize an entity id to its stored form (32-char hex).

    Raises:
        AppException: INVALID_IDENTIFIER if the value is not a UUID
    """
    try:
        return uuid.UUID(str(value)).hex
    except (ValueError, TypeError, AttributeError):
        raise AppException(ErrorType.INVALID_IDENTIFIER, f"Invalid identifier '{value}'")
