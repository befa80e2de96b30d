from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class ProductsApiError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = list(details) if details is not None else None

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class MalformedInputError(ProductsApiError):
    """Input could not be decoded: bad JSON, wrong JSON types, bad id/page/limit."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid input", details: Optional[Sequence[str]] = None) -> None:
        super().__init__(message, details if details is not None else [])


class ValidationError(ProductsApiError):
    """Input was decoded but breaks a business rule (empty name, negative price...)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, details: Sequence[str], message: str = "Invalid input") -> None:
        super().__init__(message, details)


class NotFoundError(ProductsApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Product not found") -> None:
        super().__init__(message)


class StorageError(ProductsApiError):
    """
    Persistence failure. ``message`` is the generic text returned to the caller;
    the underlying exception is chained (``raise ... from exc``) and only logged.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def format_decode_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        where = ".".join(loc) or "body"
        details.append(f"{where}: {err.get('msg', 'invalid value')}")
    return details


async def products_api_error_handler(request: Request, exc: ProductsApiError) -> JSONResponse:
    if isinstance(exc, StorageError):
        request_id = getattr(request.state, "request_id", None)
        logger.error(
            "%s on %s %s (requestId=%s)",
            exc.message,
            request.method,
            request.url.path,
            request_id,
            exc_info=exc.__cause__ or exc,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Body decoding failures are malformed input (400), not FastAPI's default 422.
    error = MalformedInputError(details=format_decode_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_content())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Do not leak internal details to the caller.
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception (requestId=%s)", request_id)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_server_error",
            "message": "Unexpected error",
            "requestId": request_id,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProductsApiError, products_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
