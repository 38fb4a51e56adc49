"""Response envelopes and the exception handlers that render failures."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.errors import ApiError

logger = logging.getLogger(__name__)


def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    """Wrap a payload in the success envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": jsonable_encoder(data, by_alias=True),
            "message": message,
            "success": True,
        },
    )


def error_response(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    """Wrap a failure in the error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "message": message,
            "success": False,
            "errors": jsonable_encoder(errors or []),
        },
    )


_LOCATIONS = ("body", "query", "path", "header", "cookie")


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    details = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ()) if p not in _LOCATIONS)
        details.append({"field": field, "message": error.get("msg", "Invalid value")})
    return details


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = _validation_errors(exc)
    message = "; ".join(
        f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors
    )
    return error_response(400, message or "Invalid request", errors)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    ip_address = request.client.host if request.client else "unknown"
    logger.warning(f"Rate limit exceeded: path={request.url.path}, ip={ip_address}")
    return error_response(429, f"Rate limit exceeded: {exc.detail}")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}", exc_info=exc
    )
    return error_response(500, "Internal server error")


def install_exception_handlers(app: FastAPI) -> None:
    """Render every failure raised by a route as the error envelope."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
