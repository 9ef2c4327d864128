import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import ErrorType, ValidationKind, ERROR_STATUS_MAP

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that services can raise."""

    def __init__(self, error_type: ErrorType, message: str, kind: ValidationKind | None = None):
        self.error_type = error_type
        self.message = message
        self.kind = kind
        super().__init__(message)

    def to_dict(self) -> dict:
        content = {
            "success": False,
            "error": self.message,
            "type": self.error_type.value,
        }
        if self.kind:
            content["kind"] = self.kind.value
        return content


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    status_code = ERROR_STATUS_MAP.get(exc.error_type, 500)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI body/query validation failures like service validation failures."""
    from app.validation import error_from_details

    return await app_exception_handler(_request, error_from_details(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """404 for unknown routes, everything else passed through."""
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": "Route not found", "path": request.url.path}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail}
    )


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )
