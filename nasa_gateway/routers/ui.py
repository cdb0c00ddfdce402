"""Server-rendered pages for people using a browser."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from nasa_gateway.auth import current_principal
from nasa_gateway.schemas.apod import ApodForm
from nasa_gateway.security import issue_csrf_token, set_csrf_cookie, validate_csrf
from nasa_gateway.security.policy import ADMIN, normalize_roles
from nasa_gateway.security.principals import Principal
from nasa_gateway.services import mars_rover
from nasa_gateway.services.apod_service import ApodService, get_apod_service
from nasa_gateway.services.nasa_client import NasaClient, get_nasa_client
from nasa_gateway.staticfiles import templates

router = APIRouter(prefix="/nasa", include_in_schema=False)

LIST_PAGE = "/nasa/list-apods"


def _render(
    request: Request,
    template_name: str,
    context: dict,
    principal: Principal | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    token = issue_csrf_token(request)
    ctx = {
        **context,
        "csrf_token": token,
        "principal": principal,
        "is_admin": principal is not None and ADMIN in normalize_roles(principal.roles),
    }
    response = templates.TemplateResponse(
        request, template_name, ctx, status_code=status_code
    )
    set_csrf_cookie(response, token)
    return response


def _field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else "form"
        errors.setdefault(field, error.get("msg", "is invalid").removeprefix("Value error, "))
    return errors


@router.get("/home-page", response_class=HTMLResponse)
def home_page(request: Request, principal: Principal = Depends(current_principal)):
    return _render(request, "nasa/home-page.html", {}, principal)


@router.get("/mars-apod", response_class=HTMLResponse)
async def mars_apod(
    request: Request,
    principal: Principal = Depends(current_principal),
    client: NasaClient = Depends(get_nasa_client),
):
    apod = await client.get_apod()
    return _render(request, "nasa/apod.html", {"apod": apod}, principal)


@router.get("/list-apods", response_class=HTMLResponse)
def list_apods(
    request: Request,
    principal: Principal = Depends(current_principal),
    service: ApodService = Depends(get_apod_service),
):
    apods = service.fetch_all_or_empty()
    return _render(request, "nasa/list-apods.html", {"apods": apods}, principal)


@router.post("/save-apod-mvc")
async def save_apod_mvc(
    request: Request,
    csrf_token: str | None = Form(None),
    client: NasaClient = Depends(get_nasa_client),
    service: ApodService = Depends(get_apod_service),
):
    validate_csrf(request, csrf_token)
    apod = await client.get_apod()
    service.save(apod)
    return RedirectResponse(LIST_PAGE, status_code=status.HTTP_302_FOUND)


@router.get("/showFormToUpdateApod", response_class=HTMLResponse)
def show_form_to_update_apod(
    request: Request,
    apod_id: int = Query(..., alias="apodId"),
    principal: Principal = Depends(current_principal),
    service: ApodService = Depends(get_apod_service),
):
    apod = service.find_by_id(apod_id)
    return _render(
        request, "nasa/update-apod-form.html", {"apod": apod, "errors": {}}, principal
    )


@router.post("/saveApodForm", response_class=HTMLResponse)
def save_apod_form(
    request: Request,
    id: int | None = Form(None),
    date: str = Form(""),
    title: str = Form(""),
    explanation: str = Form(""),
    url: str = Form(""),
    hdurl: str | None = Form(None),
    copyright: str | None = Form(None),
    csrf_token: str | None = Form(None),
    principal: Principal = Depends(current_principal),
    service: ApodService = Depends(get_apod_service),
):
    validate_csrf(request, csrf_token)
    submitted = {
        "id": id,
        "date": date,
        "title": title,
        "explanation": explanation,
        "url": url,
        "hdurl": hdurl,
        "copyright": copyright,
    }
    try:
        form = ApodForm.model_validate(submitted)
    except ValidationError as exc:
        return _render(
            request,
            "nasa/update-apod-form.html",
            {"apod": submitted, "errors": _field_errors(exc)},
            principal,
        )
    service.save(form, apod_id=form.id)
    return RedirectResponse(LIST_PAGE, status_code=status.HTTP_302_FOUND)


@router.post("/deleteApodMVC")
def delete_apod_mvc(
    request: Request,
    apod_id: int = Form(..., alias="apodId"),
    csrf_token: str | None = Form(None),
    service: ApodService = Depends(get_apod_service),
):
    validate_csrf(request, csrf_token)
    service.delete_by_id(apod_id)
    return RedirectResponse(LIST_PAGE, status_code=status.HTTP_302_FOUND)


def _rover_form_context(**extra) -> dict:
    return {
        "rovers": mars_rover.ROVERS,
        "cameras": mars_rover.ROVER_CAMERAS,
        **extra,
    }


@router.get("/mars-rover", response_class=HTMLResponse)
def mars_rover_form(request: Request, principal: Principal = Depends(current_principal)):
    return _render(
        request,
        "nasa/index.html",
        _rover_form_context(selected={}, errors={}),
        principal,
    )


@router.post("/show-photos", response_class=HTMLResponse)
async def show_photos(
    request: Request,
    rover_type: str = Form("curiosity", alias="roverType"),
    earth_date: str = Form("", alias="earthDate"),
    rover_cameras: list[str] = Form([], alias="roverCameras"),
    csrf_token: str | None = Form(None),
    principal: Principal = Depends(current_principal),
    client: NasaClient = Depends(get_nasa_client),
):
    validate_csrf(request, csrf_token)
    selected = {"rover": rover_type, "earth_date": earth_date, "cameras": rover_cameras}
    if not earth_date.strip():
        return _render(
            request,
            "nasa/index.html",
            _rover_form_context(selected=selected, errors={"earthDate": "is required"}),
            principal,
        )
    result = await mars_rover.search_rover_photos(
        client, rover_type, earth_date.strip(), rover_cameras
    )
    return _render(
        request,
        "nasa/result.html",
        {
            "photos": result.photos,
            "earth_date": earth_date.strip(),
            "rover": rover_type,
            "cameras": [camera.upper() for camera in rover_cameras],
        },
        principal,
    )
