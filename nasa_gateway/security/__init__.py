"""Security façade: policy, tokens, principals, and CSRF helpers."""

from .csrf import (  # noqa: F401
    CSRF_COOKIE_NAME,
    CSRF_FORM_FIELD,
    issue_csrf_token,
    make_csrf_token,
    set_csrf_cookie,
    validate_csrf,
)
from .policy import (  # noqa: F401
    ADMIN,
    EMPLOYEE,
    AuthorizationPolicy,
    Decision,
    default_policy,
    is_page_path,
)
from .principals import AuthenticationFailed, Principal  # noqa: F401
from .tokens import ExpiredToken, InvalidToken, TokenService  # noqa: F401

__all__ = [
    "ADMIN",
    "CSRF_COOKIE_NAME",
    "CSRF_FORM_FIELD",
    "EMPLOYEE",
    "AuthenticationFailed",
    "AuthorizationPolicy",
    "Decision",
    "ExpiredToken",
    "InvalidToken",
    "Principal",
    "TokenService",
    "default_policy",
    "is_page_path",
    "issue_csrf_token",
    "make_csrf_token",
    "set_csrf_cookie",
    "validate_csrf",
]
