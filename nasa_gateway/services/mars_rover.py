"""Mars Rover photo lookups and camera validation."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from nasa_gateway.errors import NasaNotFoundError
from nasa_gateway.schemas.rover import MarsRoverPhotosResponse
from nasa_gateway.services.nasa_client import NasaClient

logger = logging.getLogger(__name__)

ROVERS = ("curiosity", "opportunity", "spirit")

# Camera code -> full name, as documented by the Mars Rover Photos API
ROVER_CAMERAS: dict[str, str] = {
    "fhaz": "Front Hazard Avoidance Camera",
    "rhaz": "Rear Hazard Avoidance Camera",
    "mast": "Mast Camera",
    "chemcam": "Chemistry and Camera Complex",
    "mahli": "Mars Hand Lens Imager",
    "mardi": "Mars Descent Imager",
    "navcam": "Navigation Camera",
    "pancam": "Panoramic Camera",
    "minites": "Miniature Thermal Emission Spectrometer (Mini-TES)",
}


def is_valid_camera(camera: str) -> bool:
    """True when ``camera`` names a known rover camera, ignoring case."""
    return camera.lower() in ROVER_CAMERAS


def require_camera(camera: str) -> str:
    if not is_valid_camera(camera):
        raise NasaNotFoundError(f"{camera} Camera Does Not Exist")
    return camera


async def get_rover_photos(
    client: NasaClient, rover: str, earth_date: str, camera: str
) -> MarsRoverPhotosResponse:
    """Validate the camera, then ask NASA for matching photos.

    The camera code is sent as received; NASA matches it case-insensitively.
    """
    require_camera(camera)
    photos = await client.get_rover_photos(rover.lower(), earth_date, camera)
    logger.debug(
        "Fetched rover photos",
        extra={"rover": rover, "earth_date": earth_date, "count": len(photos.photos)},
    )
    return photos


async def search_rover_photos(
    client: NasaClient, rover: str, earth_date: str, cameras: Iterable[str]
) -> MarsRoverPhotosResponse:
    """Multi-camera search behind the rover page form."""
    selected = [require_camera(camera).lower() for camera in cameras]
    return await client.get_rover_photos(rover.lower(), earth_date, selected)
