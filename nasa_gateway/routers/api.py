"""JSON API for live and saved pictures, and rover photos.

Access rules for these routes live in :mod:`nasa_gateway.security.policy`.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from nasa_gateway.schemas.apod import ApodOut, ApodUpdate
from nasa_gateway.schemas.errors import ErrorResponse
from nasa_gateway.schemas.rover import MarsRoverPhotosResponse
from nasa_gateway.services import mars_rover
from nasa_gateway.services.apod_service import ApodService, get_apod_service
from nasa_gateway.services.nasa_client import NasaClient, get_nasa_client

router = APIRouter(
    prefix="/api",
    tags=["Nasa Astronomy Picture Of The Day And Mars Rover Api"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
        403: {"model": ErrorResponse, "description": "Insufficient role"},
    },
)

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}
UPSTREAM = {
    502: {"model": ErrorResponse, "description": "NASA API error"},
    503: {"model": ErrorResponse, "description": "NASA API unreachable"},
}


@router.get(
    "/apod",
    response_model=ApodOut,
    summary="This endpoint will fetch the latest Astronomy Picture Of The Day",
    responses=UPSTREAM,
)
async def get_apod(client: NasaClient = Depends(get_nasa_client)):
    return await client.get_apod()


@router.get(
    "/apods",
    response_model=list[ApodOut],
    summary="This endpoint will fetch a list of saved Astronomy Pictures Of The Day",
    responses=NOT_FOUND,
)
def get_all_apods(service: ApodService = Depends(get_apod_service)):
    return service.fetch_all()


@router.get(
    "/save-apod",
    response_class=PlainTextResponse,
    summary="Fetch today's picture and save it to the database",
    responses=UPSTREAM,
)
async def save_apod(
    client: NasaClient = Depends(get_nasa_client),
    service: ApodService = Depends(get_apod_service),
):
    apod = await client.get_apod()
    service.save(apod)
    return f"Successfully Saved\nTitle: {apod.title}\nDate: {apod.date}"


@router.get(
    "/apod/{apod_id}",
    response_model=ApodOut,
    summary="Fetch a saved picture by id",
    responses=NOT_FOUND,
)
def get_apod_by_id(apod_id: int, service: ApodService = Depends(get_apod_service)):
    return service.find_by_id(apod_id)


@router.delete(
    "/apod/{apod_id}",
    response_class=PlainTextResponse,
    summary="Delete a saved picture by id",
    responses=NOT_FOUND,
)
def delete_apod_by_id(apod_id: int, service: ApodService = Depends(get_apod_service)):
    service.delete_by_id(apod_id)
    return f"Delete Nasa Apod Id: {apod_id}"


@router.put(
    "/apod/{apod_id}",
    response_class=PlainTextResponse,
    summary="Replace the title and explanation of a saved picture",
    responses=NOT_FOUND,
)
def update_apod(
    apod_id: int,
    changes: ApodUpdate = Body(...),
    service: ApodService = Depends(get_apod_service),
):
    service.update(apod_id, changes)
    return f"Updated Nasa Apod Id: {apod_id}"


@router.get(
    "/rover/{rover_name}/{earth_date}/{rover_camera}",
    response_model=MarsRoverPhotosResponse,
    summary="Fetch Mars photos by rover name, earth date, and camera",
    description=(
        "Rovers: curiosity, spirit, opportunity. "
        "Cameras: FHAZ, RHAZ, MAST, CHEMCAM, MAHLI, MARDI, NAVCAM, PANCAM, MINITES "
        "(any case). Earth date is YYYY-MM-DD, e.g. /rover/curiosity/2015-06-03/fhaz"
    ),
    responses={**NOT_FOUND, **UPSTREAM},
)
async def get_rover_photos(
    rover_name: str,
    earth_date: str,
    rover_camera: str,
    client: NasaClient = Depends(get_nasa_client),
):
    return await mars_rover.get_rover_photos(client, rover_name, earth_date, rover_camera)
