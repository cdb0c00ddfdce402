"""Double-submit CSRF tokens for the page forms.

The token is ``<nonce>.<signature>``. It is set as a cookie when a form is
rendered and must come back both in that cookie and in the form field (or
the ``X-CSRF-Token`` header). The signature ties the token to this
deployment's ``csrf_secret``.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from fastapi import HTTPException, Request, Response, status

from nasa_gateway.config import settings

CSRF_COOKIE_NAME = "nasa_csrf"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_FORM_FIELD = "csrf_token"


def _sign(nonce: str) -> str:
    return hmac.new(
        settings.csrf_secret.encode(), nonce.encode(), hashlib.sha256
    ).hexdigest()


def make_csrf_token() -> str:
    nonce = secrets.token_urlsafe(24)
    return f"{nonce}.{_sign(nonce)}"


def is_well_signed(token: str) -> bool:
    nonce, sep, signature = token.partition(".")
    if not sep or not nonce:
        return False
    return hmac.compare_digest(signature, _sign(nonce))


def issue_csrf_token(request: Request) -> str:
    """Reuse the request's token (or a valid cookie) before minting a new one."""
    token: str | None = getattr(request.state, "csrf_token", None)
    if token:
        return token
    incoming = request.cookies.get(CSRF_COOKIE_NAME)
    token = incoming if incoming and is_well_signed(incoming) else make_csrf_token()
    request.state.csrf_token = token
    return token


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        secure=not settings.debug,
        httponly=True,
        samesite="strict",
        max_age=60 * 60 * 12,
    )


def validate_csrf(request: Request, token: str | None) -> bool:
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    candidate = token or request.headers.get(CSRF_HEADER_NAME)
    if not cookie_token or not candidate:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid CSRF token.")
    if not hmac.compare_digest(cookie_token, candidate) or not is_well_signed(candidate):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid CSRF token.")
    return True
