"""Role-based access rules for every route, in one table.

Each :class:`Rule` pairs a set of HTTP methods and a path template with a
requirement: public, any authenticated principal, or any one of a set of
roles. Rules are checked in order and the first match wins, so specific
templates must come before broader ones. Paths that match nothing require
an authenticated principal.

Path templates use ``{name}`` for a single path segment and a trailing
``/**`` for "this prefix and anything below it".

Roles carry the ``ROLE_`` prefix. A ``SCOPE_`` prefix (how roles look when
read back out of a token's scope claim by some clients) is stripped before
comparison. ADMIN does not implicitly include EMPLOYEE; every rule that
admits employees lists ADMIN as well.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

EMPLOYEE = "ROLE_EMPLOYEE"
ADMIN = "ROLE_ADMIN"
STAFF = frozenset({EMPLOYEE, ADMIN})
ADMIN_ONLY = frozenset({ADMIN})

SCOPE_PREFIX = "SCOPE_"

_PARAM_RE = re.compile(r"\{[^/{}]+\}")

# Route classes whose failures are rendered as pages instead of JSON
PAGE_PREFIXES = ("/nasa/",)
PAGE_PATHS = frozenset({"/", "/show-login-page"})


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def normalize_path(path: str) -> str:
    if len(path) > 1 and path.endswith("/"):
        return path.rstrip("/") or "/"
    return path


def normalize_roles(roles: Iterable[str]) -> frozenset[str]:
    """Drop any ``SCOPE_`` prefix so token and session roles compare equal."""
    return frozenset(
        role[len(SCOPE_PREFIX) :] if role.startswith(SCOPE_PREFIX) else role
        for role in roles
    )


def is_page_path(path: str) -> bool:
    path = normalize_path(path)
    return path in PAGE_PATHS or path.startswith(PAGE_PREFIXES)


def compile_template(template: str) -> re.Pattern[str]:
    """Turn a path template into an anchored regular expression."""
    recursive = template.endswith("/**")
    base = template[:-3] if recursive else template
    parts = []
    last = 0
    for match in _PARAM_RE.finditer(base):
        parts.append(re.escape(base[last : match.start()]))
        parts.append("[^/]+")
        last = match.end()
    parts.append(re.escape(base[last:]))
    pattern = "".join(parts)
    if recursive:
        pattern += "(?:/.*)?"
    return re.compile(f"^{pattern}$")


@dataclass(frozen=True)
class Rule:
    """One line of the policy table.

    ``methods`` of ``None`` matches any method. With ``public`` set no
    principal is needed; otherwise ``roles`` of ``None`` means any
    authenticated principal, and a role set means "any one of these".
    """

    template: str
    methods: frozenset[str] | None = None
    roles: frozenset[str] | None = None
    public: bool = False
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_template(self.template))

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method not in self.methods:
            return False
        return self.pattern.match(path) is not None

    def admits(self, roles: frozenset[str]) -> bool:
        if self.public or self.roles is None:
            return True
        return bool(normalize_roles(roles) & self.roles)


def _methods(methods: str | Iterable[str] | None) -> frozenset[str] | None:
    if methods is None:
        return None
    if isinstance(methods, str):
        methods = [methods]
    return frozenset(m.upper() for m in methods)


def permit_all(*templates: str, methods: str | Iterable[str] | None = None) -> list[Rule]:
    return [Rule(t, methods=_methods(methods), public=True) for t in templates]


def authenticated(*templates: str, methods: str | Iterable[str] | None = None) -> list[Rule]:
    return [Rule(t, methods=_methods(methods)) for t in templates]


def has_any_role(
    roles: Iterable[str],
    *templates: str,
    methods: str | Iterable[str] | None = None,
) -> list[Rule]:
    role_set = frozenset(roles)
    return [Rule(t, methods=_methods(methods), roles=role_set) for t in templates]


class AuthorizationPolicy:
    """Ordered rule table evaluated once per request."""

    def __init__(self, rules: Sequence[Rule]) -> None:
        self.rules = tuple(rules)

    def rule_for(self, method: str, path: str) -> Rule | None:
        method = method.upper()
        if method == "HEAD":
            method = "GET"
        path = normalize_path(path)
        for rule in self.rules:
            if rule.matches(method, path):
                return rule
        return None

    def is_public(self, method: str, path: str) -> bool:
        rule = self.rule_for(method, path)
        return rule is not None and rule.public

    def decide(self, roles: Iterable[str] | None, method: str, path: str) -> Decision:
        """Decide whether a caller holding ``roles`` may proceed.

        ``roles`` of ``None`` means the caller is anonymous.
        """
        rule = self.rule_for(method, path)
        if rule is not None and rule.public:
            return Decision.ALLOW
        if roles is None:
            return Decision.UNAUTHENTICATED
        if rule is None or rule.admits(frozenset(roles)):
            return Decision.ALLOW
        return Decision.FORBIDDEN


DEFAULT_RULES: list[Rule] = [
    # Static assets, documentation, and the ways in
    *permit_all(
        "/static/**",
        "/images/**",
        "/docs",
        "/docs/**",
        "/redoc",
        "/openapi.json",
        "/favicon.ico",
        "/healthz",
        "/readyz",
        "/show-login-page",
        "/logout",
    ),
    *permit_all("/authenticate", "/authenticateTheUser", methods="POST"),
    # JSON API
    *has_any_role(
        STAFF,
        "/api/apod",
        "/api/apods",
        "/api/save-apod",
        "/api/apod/{id}",
        "/api/rover/{rover}/{earth_date}/{camera}",
        methods="GET",
    ),
    *has_any_role(ADMIN_ONLY, "/api/apod/{id}", methods=("PUT", "DELETE")),
    # Pages
    *has_any_role(
        STAFF,
        "/nasa/home-page",
        "/nasa/mars-apod",
        "/nasa/mars-rover",
        methods="GET",
    ),
    *has_any_role(STAFF, "/nasa/save-apod-mvc", "/nasa/show-photos", methods="POST"),
    *has_any_role(
        ADMIN_ONLY,
        "/nasa/list-apods",
        "/nasa/showFormToUpdateApod",
        methods="GET",
    ),
    *has_any_role(
        ADMIN_ONLY, "/nasa/saveApodForm", "/nasa/deleteApodMVC", methods="POST"
    ),
    *has_any_role(ADMIN_ONLY, "/metrics", methods="GET"),
    # Everything else
    *authenticated("/**"),
]

default_policy = AuthorizationPolicy(DEFAULT_RULES)
