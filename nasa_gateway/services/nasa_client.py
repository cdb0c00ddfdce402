"""Client for the NASA APOD and Mars Rover Photos APIs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from nasa_gateway.config import settings
from nasa_gateway.errors import UpstreamError, UpstreamUnavailableError
from nasa_gateway.observability.metrics import UPSTREAM_FAILURES
from nasa_gateway.schemas.apod import ApodOut
from nasa_gateway.schemas.rover import MarsRoverPhotosResponse

logger = logging.getLogger(__name__)


class NasaClient:
    """Fetch live records from api.nasa.gov.

    Every failure surfaces as :class:`UpstreamError` (NASA answered badly)
    or :class:`UpstreamUnavailableError` (NASA did not answer). Nothing is
    retried or cached.
    """

    def __init__(
        self,
        api_key: str | None = None,
        apod_url: str | None = None,
        rovers_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key
        self._apod_url = apod_url
        self._rovers_url = rovers_url
        self._timeout = timeout

    @property
    def api_key(self) -> str:
        return self._api_key or settings.nasa_api_key or "DEMO_KEY"

    @property
    def apod_url(self) -> str:
        return self._apod_url or settings.apod_url

    @property
    def rovers_url(self) -> str:
        return (self._rovers_url or settings.rovers_url).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout or settings.nasa_timeout_seconds

    async def _get_json(self, endpoint: str, url: str, params: dict[str, Any]) -> Any:
        query = {**params, "api_key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=query)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            UPSTREAM_FAILURES.labels(endpoint, "status").inc()
            logger.warning(
                "NASA API returned an error status",
                extra={"endpoint": endpoint, "status_code": code},
            )
            raise UpstreamError(f"NASA API responded with status {code}") from exc
        except httpx.RequestError as exc:
            UPSTREAM_FAILURES.labels(endpoint, "unreachable").inc()
            logger.warning(
                "NASA API request failed",
                extra={"endpoint": endpoint, "error": type(exc).__name__},
            )
            raise UpstreamUnavailableError("NASA API is unavailable") from exc
        except ValueError as exc:
            UPSTREAM_FAILURES.labels(endpoint, "decode").inc()
            logger.warning("NASA API returned invalid JSON", extra={"endpoint": endpoint})
            raise UpstreamError("NASA API returned an unreadable response") from exc

    @staticmethod
    def _parse(endpoint: str, model: type[BaseModel], data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            UPSTREAM_FAILURES.labels(endpoint, "schema").inc()
            logger.warning(
                "NASA API payload did not match the expected shape",
                extra={"endpoint": endpoint, "errors": exc.error_count()},
            )
            raise UpstreamError("NASA API returned an unexpected payload") from exc

    async def get_apod(self) -> ApodOut:
        """Today's Astronomy Picture of the Day, unsaved (``id`` is ``None``)."""
        data = await self._get_json("apod", self.apod_url, {})
        return self._parse("apod", ApodOut, data)

    async def get_rover_photos(
        self, rover: str, earth_date: str, cameras: str | Sequence[str]
    ) -> MarsRoverPhotosResponse:
        """Photos one rover took on ``earth_date`` with the given camera(s).

        ``rover`` and ``earth_date`` are passed through as given; several
        cameras become repeated ``camera`` query parameters.
        """
        camera_param: str | list[str] = (
            cameras if isinstance(cameras, str) else list(cameras)
        )
        data = await self._get_json(
            "rover_photos",
            f"{self.rovers_url}/{rover}/photos",
            {"earth_date": earth_date, "camera": camera_param},
        )
        return self._parse("rover_photos", MarsRoverPhotosResponse, data)


nasa_client = NasaClient()


def get_nasa_client() -> NasaClient:
    return nasa_client
