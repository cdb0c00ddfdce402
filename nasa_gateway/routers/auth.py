"""Token issuance for API clients and form login for the pages."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from nasa_gateway.auth import check_credentials, issue_token, optional_principal
from nasa_gateway.config import settings
from nasa_gateway.errors import AuthenticationRequired
from nasa_gateway.schemas.auth import TokenResponse
from nasa_gateway.schemas.errors import ErrorResponse
from nasa_gateway.security import issue_csrf_token, set_csrf_cookie, validate_csrf
from nasa_gateway.security.principals import Principal
from nasa_gateway.staticfiles import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

HOME_PAGE = "/nasa/home-page"
LOGIN_PAGE = "/show-login-page"


def _safe_next(next_url: str | None) -> str:
    # Only same-site paths; anything else could bounce the user off-site
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return HOME_PAGE


def _credentialed(principal: Principal | None) -> Principal:
    # Tokens are only minted from a password check, never from another token
    if principal is None or principal.authenticated_by != "basic":
        raise AuthenticationRequired("Bad credentials")
    return principal


@router.post(
    "/authenticate",
    response_model=TokenResponse,
    summary="Exchange credentials for a bearer token",
    description=(
        "Send the username and password as HTTP Basic credentials, or as "
        "`username`/`password` form fields. Tokens expire after 30 minutes."
    ),
    responses={401: {"model": ErrorResponse}},
)
async def authenticate(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
):
    principal = optional_principal(request)
    if principal is None and username and password is not None:
        principal = await check_credentials(username, password)
    principal = _credentialed(principal)
    token = issue_token(principal)
    logger.info("Issued token", extra={"user_id": principal.user_id})
    return TokenResponse(token=token)


@router.get("/get-token", response_class=PlainTextResponse, include_in_schema=False)
def get_token(principal: Principal | None = Depends(optional_principal)):
    return issue_token(_credentialed(principal))


@router.get(LOGIN_PAGE, response_class=HTMLResponse, include_in_schema=False)
def login_page(request: Request):
    csrf_token = issue_csrf_token(request)
    response = templates.TemplateResponse(
        request,
        "nasa/login.html",
        {
            "csrf_token": csrf_token,
            "next_url": _safe_next(request.query_params.get("next")),
            "error": "error" in request.query_params,
            "logged_out": "logout" in request.query_params,
        },
    )
    set_csrf_cookie(response, csrf_token)
    return response


@router.post("/authenticateTheUser", include_in_schema=False)
async def login(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    csrf_token: str | None = Form(None),
    next_url: str | None = Form(None, alias="next"),
):
    validate_csrf(request, csrf_token)
    principal = await check_credentials(username, password)
    if principal is None:
        return RedirectResponse(f"{LOGIN_PAGE}?error", status_code=status.HTTP_302_FOUND)

    response = RedirectResponse(_safe_next(next_url), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.auth_cookie_name,
        issue_token(principal),
        max_age=settings.jwt_lifetime_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    logger.info("Signed in", extra={"user_id": principal.user_id})
    return response


@router.post("/logout", include_in_schema=False)
def logout(request: Request, csrf_token: str | None = Form(None)):
    validate_csrf(request, csrf_token)
    response = RedirectResponse(f"{LOGIN_PAGE}?logout", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(settings.auth_cookie_name)
    return response


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
