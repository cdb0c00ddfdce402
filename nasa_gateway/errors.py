"""Typed failures raised by handlers and the helpers that render them."""

from __future__ import annotations

import time

from fastapi import status
from fastapi.responses import JSONResponse

from nasa_gateway.schemas.errors import ErrorResponse


class NasaGatewayError(Exception):
    """Base for failures that map to a specific HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NasaNotFoundError(NasaGatewayError):
    """Requested record, or a valid-looking filter value, does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(NasaGatewayError):
    """The NASA API answered, but not with something usable."""

    status_code = status.HTTP_502_BAD_GATEWAY


class UpstreamUnavailableError(UpstreamError):
    """The NASA API could not be reached or did not answer in time."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class AuthenticationRequired(NasaGatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED


def now_millis() -> int:
    return int(time.time() * 1000)


def error_record(status_code: int, message: str) -> ErrorResponse:
    return ErrorResponse(status=status_code, message=message, timestamp=now_millis())


def error_json(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the ``{status, message, timestamp}`` response every API failure uses."""
    return JSONResponse(
        error_record(status_code, message).model_dump(),
        status_code=status_code,
        headers=headers,
    )
