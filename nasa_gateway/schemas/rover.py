"""Mars Rover Photos payloads, mirroring the NASA field names."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RoverStatus(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"


class MarsRoverCamera(BaseModel):
    """A camera, either on a photo or in a rover's camera list.

    Cameras listed under a rover only carry ``name`` and ``full_name``.
    """

    id: int | None = None
    name: str
    rover_id: int | None = None
    full_name: str = ""


class MarsRover(BaseModel):
    id: int
    name: str
    landing_date: str | None = None
    launch_date: str | None = None
    status: RoverStatus
    max_sol: int | None = None
    max_date: str | None = None
    total_photos: int | None = None
    cameras: list[MarsRoverCamera] = Field(default_factory=list)


class MarsRoverPhoto(BaseModel):
    id: int
    sol: int
    camera: MarsRoverCamera
    img_src: str
    earth_date: str
    rover: MarsRover


class MarsRoverPhotosResponse(BaseModel):
    photos: list[MarsRoverPhoto] = Field(default_factory=list)
