from enum import Enum


class ErrorType(Enum):
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    INVALID_IDENTIFIER = "invalid_identifier"
    STORE_UNAVAILABLE = "store_unavailable"
    INTERNAL_ERROR = "internal_error"


class ValidationKind(Enum):
    MISSING_FIELD = "MissingField"
    OUT_OF_RANGE = "OutOfRange"
    INVALID_ENUM = "InvalidEnum"
    INVALID_TYPE = "InvalidType"
    UNKNOWN_FIELD = "UnknownField"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.INVALID_IDENTIFIER: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.STORE_UNAVAILABLE: 503,
    ErrorType.INTERNAL_ERROR: 500,
}
