"""Ways of working out who is making a request.

Each strategy looks for one kind of credential. A strategy returns ``None``
when its credential is absent, a :class:`Principal` when it is valid, and
raises :class:`AuthenticationFailed` when a credential is present but cannot
be trusted. :func:`resolve_principal` asks each strategy in turn and stops at
the first one that finds something, so a bad bearer token is never rescued
by a session cookie.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from starlette.requests import Request

from nasa_gateway.security.tokens import ExpiredToken, InvalidToken, TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: str
    roles: frozenset[str]
    authenticated_by: str


class AuthenticationFailed(Exception):
    """A credential was presented but is not valid."""


class PrincipalStrategy(Protocol):
    name: str

    async def resolve(self, request: Request) -> Principal | None: ...


def _authorization_header(request: Request, scheme: str) -> str | None:
    header = request.headers.get("authorization")
    if not header:
        return None
    found_scheme, _, credentials = header.partition(" ")
    if found_scheme.lower() != scheme.lower():
        return None
    return credentials.strip()


class BearerTokenStrategy:
    """``Authorization: Bearer <token>`` for API clients."""

    name = "bearer"

    def __init__(self, tokens: TokenService) -> None:
        self.tokens = tokens

    async def resolve(self, request: Request) -> Principal | None:
        token = _authorization_header(request, "Bearer")
        if token is None:
            return None
        if not token:
            raise AuthenticationFailed("Bearer token is empty")
        try:
            claims = self.tokens.validate(token)
        except ExpiredToken as exc:
            raise AuthenticationFailed("Bearer token has expired") from exc
        except InvalidToken as exc:
            raise AuthenticationFailed("Bearer token is invalid") from exc
        return Principal(claims.subject, claims.roles, self.name)


CredentialChecker = Callable[[str, str], Awaitable[Principal | None]]


class BasicCredentialsStrategy:
    """``Authorization: Basic`` checked against the member store."""

    name = "basic"

    def __init__(self, check_credentials: CredentialChecker) -> None:
        self.check_credentials = check_credentials

    async def resolve(self, request: Request) -> Principal | None:
        encoded = _authorization_header(request, "Basic")
        if encoded is None:
            return None
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise AuthenticationFailed("Malformed basic credentials") from exc
        username, sep, password = decoded.partition(":")
        if not sep or not username:
            raise AuthenticationFailed("Malformed basic credentials")
        principal = await self.check_credentials(username, password)
        if principal is None:
            raise AuthenticationFailed("Bad credentials")
        return principal


class SessionCookieStrategy:
    """Token carried in the cookie set by the login form.

    A stale or tampered cookie counts as no session at all, so the browser
    is sent back to the login page rather than shown an error.
    """

    name = "session"

    def __init__(self, tokens: TokenService, cookie_name: str) -> None:
        self.tokens = tokens
        self.cookie_name = cookie_name

    async def resolve(self, request: Request) -> Principal | None:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        try:
            claims = self.tokens.validate(token)
        except InvalidToken as exc:
            logger.debug("Ignoring unusable session cookie: %s", exc)
            return None
        return Principal(claims.subject, claims.roles, self.name)


async def resolve_principal(
    request: Request, strategies: Sequence[PrincipalStrategy]
) -> Principal | None:
    for strategy in strategies:
        principal = await strategy.resolve(request)
        if principal is not None:
            return principal
    return None
