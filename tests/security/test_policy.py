"""Tests for the route authorization table."""

from __future__ import annotations

import pytest

from nasa_gateway.security.policy import (
    ADMIN,
    EMPLOYEE,
    AuthorizationPolicy,
    Decision,
    compile_template,
    default_policy,
    has_any_role,
    is_page_path,
    normalize_roles,
    permit_all,
)

STAFF_ROLES = frozenset({EMPLOYEE})
ADMIN_ROLES = frozenset({EMPLOYEE, ADMIN})


class TestTemplates:
    def test_parameter_matches_one_segment(self):
        pattern = compile_template("/api/apod/{id}")
        assert pattern.match("/api/apod/7")
        assert pattern.match("/api/apod/not-a-number")
        assert not pattern.match("/api/apod")
        assert not pattern.match("/api/apod/7/extra")

    def test_recursive_suffix_matches_prefix_and_below(self):
        pattern = compile_template("/static/**")
        assert pattern.match("/static")
        assert pattern.match("/static/css/site.css")
        assert not pattern.match("/staticfiles")

    def test_literal_characters_are_escaped(self):
        pattern = compile_template("/openapi.json")
        assert pattern.match("/openapi.json")
        assert not pattern.match("/openapiXjson")


class TestRoles:
    def test_scope_prefix_is_stripped(self):
        assert normalize_roles({"SCOPE_ROLE_ADMIN", "ROLE_EMPLOYEE"}) == ADMIN_ROLES

    def test_scope_prefixed_admin_passes_admin_rule(self):
        decision = default_policy.decide({"SCOPE_ROLE_ADMIN"}, "DELETE", "/api/apod/1")
        assert decision is Decision.ALLOW


class TestDefaultPolicy:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/static/css/site.css"),
            ("GET", "/docs"),
            ("GET", "/openapi.json"),
            ("GET", "/healthz"),
            ("GET", "/show-login-page"),
            ("POST", "/authenticate"),
            ("POST", "/authenticateTheUser"),
        ],
    )
    def test_public_routes_admit_anonymous(self, method, path):
        assert default_policy.decide(None, method, path) is Decision.ALLOW

    def test_anonymous_api_call_is_unauthenticated(self):
        assert default_policy.decide(None, "GET", "/api/apods") is Decision.UNAUTHENTICATED

    def test_get_authenticate_is_not_public(self):
        assert not default_policy.is_public("GET", "/authenticate")

    def test_employee_reads_api(self):
        for path in (
            "/api/apod",
            "/api/apods",
            "/api/save-apod",
            "/api/apod/3",
            "/api/rover/curiosity/2015-06-03/fhaz",
        ):
            assert default_policy.decide(STAFF_ROLES, "GET", path) is Decision.ALLOW

    @pytest.mark.parametrize("method", ["PUT", "DELETE"])
    def test_employee_cannot_modify(self, method):
        assert default_policy.decide(STAFF_ROLES, method, "/api/apod/3") is Decision.FORBIDDEN

    @pytest.mark.parametrize("method", ["PUT", "DELETE"])
    def test_admin_can_modify(self, method):
        assert default_policy.decide(ADMIN_ROLES, method, "/api/apod/3") is Decision.ALLOW

    def test_admin_without_employee_role_reads_api(self):
        assert default_policy.decide({ADMIN}, "GET", "/api/apods") is Decision.ALLOW

    def test_principal_without_roles_is_forbidden_from_api(self):
        assert default_policy.decide(set(), "GET", "/api/apods") is Decision.FORBIDDEN

    def test_admin_pages_reject_employees(self):
        assert (
            default_policy.decide(STAFF_ROLES, "GET", "/nasa/list-apods")
            is Decision.FORBIDDEN
        )
        assert (
            default_policy.decide(ADMIN_ROLES, "GET", "/nasa/list-apods")
            is Decision.ALLOW
        )

    def test_metrics_is_admin_only(self):
        assert default_policy.decide(STAFF_ROLES, "GET", "/metrics") is Decision.FORBIDDEN

    def test_unlisted_paths_need_any_principal(self):
        assert default_policy.decide(None, "GET", "/nowhere") is Decision.UNAUTHENTICATED
        assert default_policy.decide(set(), "GET", "/nowhere") is Decision.ALLOW

    def test_head_is_treated_as_get(self):
        assert default_policy.decide(STAFF_ROLES, "HEAD", "/api/apods") is Decision.ALLOW

    def test_trailing_slash_is_ignored(self):
        assert default_policy.decide(None, "GET", "/healthz/") is Decision.ALLOW

    def test_unlisted_method_falls_through_to_catch_all(self):
        # POST /api/apods matches no role rule, only the authenticated catch-all
        assert default_policy.decide(STAFF_ROLES, "POST", "/api/apods") is Decision.ALLOW


def test_first_matching_rule_wins():
    policy = AuthorizationPolicy(
        [
            *has_any_role({ADMIN}, "/reports/{id}"),
            *permit_all("/reports/**"),
        ]
    )
    assert policy.decide(None, "GET", "/reports/1") is Decision.UNAUTHENTICATED
    assert policy.decide(None, "GET", "/reports/1/summary") is Decision.ALLOW


def test_page_paths():
    assert is_page_path("/nasa/home-page")
    assert is_page_path("/show-login-page")
    assert is_page_path("/")
    assert not is_page_path("/api/apods")
    assert not is_page_path("/metrics")
