from __future__ import annotations

from datetime import timedelta

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from nasa_gateway.config import settings
from nasa_gateway.database import SessionLocal
from nasa_gateway.errors import AuthenticationRequired
from nasa_gateway.security.principals import (
    BasicCredentialsStrategy,
    BearerTokenStrategy,
    Principal,
    SessionCookieStrategy,
)
from nasa_gateway.security.tokens import TokenService
from nasa_gateway.services.members import authenticate_member

token_service = TokenService(
    issuer=settings.jwt_issuer,
    lifetime=timedelta(seconds=settings.jwt_lifetime_seconds),
    key_size=settings.jwt_key_size,
)


def _check_credentials_sync(username: str, password: str) -> Principal | None:
    with SessionLocal() as db:
        member = authenticate_member(db, username, password)
        if member is None:
            return None
        return Principal(member.user_id, member.role_names, "basic")


async def check_credentials(username: str, password: str) -> Principal | None:
    return await run_in_threadpool(_check_credentials_sync, username, password)


principal_strategies = [
    BearerTokenStrategy(token_service),
    BasicCredentialsStrategy(check_credentials),
    SessionCookieStrategy(token_service, settings.auth_cookie_name),
]


def optional_principal(request: Request) -> Principal | None:
    return getattr(request.state, "principal", None)


def current_principal(request: Request) -> Principal:
    """The caller resolved by the authorization middleware.

    Protected routes never reach their handler without one; public routes
    that still need to know the caller (``/authenticate``) get a 401 here.
    """
    principal = optional_principal(request)
    if principal is None:
        raise AuthenticationRequired(
            "Full authentication is required to access this resource"
        )
    return principal


def issue_token(principal: Principal) -> str:
    return token_service.issue(principal.user_id, principal.roles)
