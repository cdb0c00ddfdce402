"""Routing-layer gate: resolve the caller, then apply the policy table."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from urllib.parse import quote

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from nasa_gateway.errors import error_json
from nasa_gateway.observability.metrics import AUTH_DECISIONS
from nasa_gateway.security.policy import AuthorizationPolicy, Decision, is_page_path
from nasa_gateway.security.principals import (
    AuthenticationFailed,
    Principal,
    PrincipalStrategy,
    resolve_principal,
)
from nasa_gateway.staticfiles import templates

logger = logging.getLogger(__name__)

LOGIN_PATH = "/show-login-page"
UNAUTHENTICATED_MESSAGE = "Full authentication is required to access this resource"
FORBIDDEN_MESSAGE = "Access Denied"


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """Attach ``request.state.principal`` and enforce the policy.

    Failures are answered per route class. API routes get the JSON error
    record (401 with ``WWW-Authenticate: Bearer``, or 403). Page routes are
    redirected to the login page on 401 and shown the access-denied page
    on 403.
    """

    def __init__(
        self,
        app,
        *,
        policy: AuthorizationPolicy,
        strategies: Sequence[PrincipalStrategy],
        login_path: str = LOGIN_PATH,
    ) -> None:
        super().__init__(app)
        self.policy = policy
        self.strategies = list(strategies)
        self.login_path = login_path

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method, path = request.method, request.url.path
        try:
            principal = await resolve_principal(request, self.strategies)
        except AuthenticationFailed as exc:
            AUTH_DECISIONS.labels("invalid_credentials").inc()
            logger.info(
                "Rejected credentials",
                extra={"method": method, "path": path, "reason": str(exc)},
            )
            return self._unauthenticated(request, str(exc))

        request.state.principal = principal
        roles = principal.roles if principal is not None else None
        decision = self.policy.decide(roles, method, path)
        AUTH_DECISIONS.labels(decision.value).inc()

        if decision is Decision.UNAUTHENTICATED:
            return self._unauthenticated(request, UNAUTHENTICATED_MESSAGE)
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Denied access",
                extra={"method": method, "path": path, "user_id": principal.user_id},
            )
            return self._forbidden(request, principal)
        return await call_next(request)

    def _unauthenticated(self, request: Request, message: str) -> Response:
        if is_page_path(request.url.path):
            next_url = quote(request.url.path)
            return RedirectResponse(
                f"{self.login_path}?next={next_url}",
                status_code=status.HTTP_302_FOUND,
            )
        return error_json(
            status.HTTP_401_UNAUTHORIZED,
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    def _forbidden(self, request: Request, principal: Principal | None) -> Response:
        if is_page_path(request.url.path):
            return templates.TemplateResponse(
                request,
                "nasa/access-denied.html",
                {"principal": principal},
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return error_json(status.HTTP_403_FORBIDDEN, FORBIDDEN_MESSAGE)
