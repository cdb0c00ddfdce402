"""Map raised failures onto the ``{status, message, timestamp}`` contract.

- NasaGatewayError subclasses carry their own status (404, 502, 503, 401)
- request validation problems (bad path ids, malformed bodies) are 400
- other HTTP exceptions keep their status
- anything else is 400 with the exception message
Page routes get the same record rendered into the error page.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from nasa_gateway.errors import NasaGatewayError, error_json, error_record
from nasa_gateway.security.policy import is_page_path
from nasa_gateway.staticfiles import templates

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(NasaGatewayError, nasa_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def render_error(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> Response:
    if is_page_path(request.url.path):
        return templates.TemplateResponse(
            request,
            "nasa/error.html",
            {"error": error_record(status_code, message)},
            status_code=status_code,
            headers=headers,
        )
    return error_json(status_code, message, headers=headers)


async def nasa_error_handler(request: Request, exc: NasaGatewayError) -> Response:
    if exc.status_code >= 500:
        logger.warning(
            "Upstream failure",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return render_error(request, exc.status_code, exc.message, headers=headers)


def describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "Invalid request: " + "; ".join(parts)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    message = describe_validation_errors(exc)
    logger.info("Validation error", extra={"path": request.url.path, "detail": message})
    return render_error(request, status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    return render_error(
        request,
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    # Message is passed through as-is; it may reveal internals.
    logger.exception("Unhandled exception", extra={"path": request.url.path})
    return render_error(request, status.HTTP_400_BAD_REQUEST, str(exc))
