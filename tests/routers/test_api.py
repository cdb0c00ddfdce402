"""Tests for the JSON API under /api."""

from __future__ import annotations

from fastapi.testclient import TestClient

from nasa_gateway.errors import UpstreamError, UpstreamUnavailableError
from nasa_gateway.services.apod_service import NO_APODS_MESSAGE


def _assert_error(response, status_code: int, message: str):
    assert response.status_code == status_code
    body = response.json()
    assert body["status"] == status_code
    assert body["message"] == message
    assert isinstance(body["timestamp"], int)


def _save(client, headers, nasa, **changes):
    nasa.apod = nasa.apod.model_copy(update=changes)
    assert client.get("/api/save-apod", headers=headers).status_code == 200
    return client.get("/api/apods", headers=headers).json()[-1]


class TestAuthentication:
    def test_anonymous_gets_401(self, client: TestClient, nasa):
        response = client.get("/api/apod")
        _assert_error(response, 401, "Full authentication is required to access this resource")
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert nasa.calls == []

    def test_invalid_bearer_gets_401(self, client: TestClient, nasa):
        response = client.get("/api/apod", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_scope_prefixed_role_is_accepted(self, client: TestClient, nasa, bearer):
        response = client.get("/api/apod", headers=bearer("svc", "SCOPE_ROLE_EMPLOYEE"))
        assert response.status_code == 200

    def test_principal_without_roles_is_forbidden(self, client: TestClient, nasa, bearer):
        response = client.get("/api/apod", headers=bearer("nobody"))
        _assert_error(response, 403, "Access Denied")


class TestLiveApod:
    def test_returns_unsaved_record(self, client: TestClient, nasa, employee_headers):
        response = client.get("/api/apod", headers=employee_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Aurora over Iceland"
        assert body["id"] is None

    def test_upstream_error_is_502(self, client: TestClient, nasa, employee_headers):
        nasa.error = UpstreamError("NASA API responded with status 500")
        response = client.get("/api/apod", headers=employee_headers)
        _assert_error(response, 502, "NASA API responded with status 500")

    def test_upstream_unreachable_is_503(self, client: TestClient, nasa, employee_headers):
        nasa.error = UpstreamUnavailableError("NASA API is unavailable")
        response = client.get("/api/apod", headers=employee_headers)
        _assert_error(response, 503, "NASA API is unavailable")


class TestSavedApods:
    def test_list_is_404_when_empty(self, client: TestClient, db_session, employee_headers):
        _assert_error(client.get("/api/apods", headers=employee_headers), 404, NO_APODS_MESSAGE)

    def test_save_then_read_back(self, client: TestClient, db_session, nasa, employee_headers):
        response = client.get("/api/save-apod", headers=employee_headers)
        assert response.status_code == 200
        assert response.text == (
            "Successfully Saved\nTitle: Aurora over Iceland\nDate: 2024-05-01"
        )

        listed = client.get("/api/apods", headers=employee_headers).json()
        assert len(listed) == 1
        apod_id = listed[0]["id"]
        fetched = client.get(f"/api/apod/{apod_id}", headers=employee_headers).json()
        assert fetched == listed[0]
        assert fetched["copyright"] == "Jane Doe"

    def test_saving_same_day_twice_creates_two_rows(
        self, client: TestClient, db_session, nasa, employee_headers
    ):
        client.get("/api/save-apod", headers=employee_headers)
        client.get("/api/save-apod", headers=employee_headers)
        assert len(client.get("/api/apods", headers=employee_headers).json()) == 2

    def test_missing_id_is_404(self, client: TestClient, db_session, employee_headers):
        _assert_error(
            client.get("/api/apod/999", headers=employee_headers),
            404,
            "No Apod Found With Id: 999",
        )

    def test_non_numeric_id_is_400(self, client: TestClient, employee_headers):
        response = client.get("/api/apod/abc", headers=employee_headers)
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid request:")


class TestModification:
    def test_employee_cannot_delete(
        self, client: TestClient, db_session, nasa, employee_headers
    ):
        saved = _save(client, employee_headers, nasa)
        response = client.delete(f"/api/apod/{saved['id']}", headers=employee_headers)
        _assert_error(response, 403, "Access Denied")
        assert client.get(f"/api/apod/{saved['id']}", headers=employee_headers).status_code == 200

    def test_employee_cannot_update(self, client: TestClient, employee_headers):
        response = client.put(
            "/api/apod/1",
            json={"title": "t", "explanation": "e"},
            headers=employee_headers,
        )
        _assert_error(response, 403, "Access Denied")

    def test_admin_deletes(self, client: TestClient, db_session, nasa, admin_headers):
        saved = _save(client, admin_headers, nasa)
        response = client.delete(f"/api/apod/{saved['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.text == f"Delete Nasa Apod Id: {saved['id']}"
        assert client.get(f"/api/apod/{saved['id']}", headers=admin_headers).status_code == 404

    def test_admin_delete_missing_is_404(self, client: TestClient, db_session, admin_headers):
        _assert_error(
            client.delete("/api/apod/31337", headers=admin_headers),
            404,
            "No Apod Found With Id: 31337",
        )

    def test_admin_update_changes_title_and_explanation_only(
        self, client: TestClient, db_session, nasa, admin_headers
    ):
        saved = _save(client, admin_headers, nasa)
        body = {**saved, "title": "Renamed", "explanation": "Rewritten", "url": "ignored"}

        response = client.put(f"/api/apod/{saved['id']}", json=body, headers=admin_headers)

        assert response.status_code == 200
        assert response.text == f"Updated Nasa Apod Id: {saved['id']}"
        after = client.get(f"/api/apod/{saved['id']}", headers=admin_headers).json()
        assert after == {**saved, "title": "Renamed", "explanation": "Rewritten"}

    def test_update_missing_is_404(self, client: TestClient, db_session, admin_headers):
        response = client.put(
            "/api/apod/404404",
            json={"title": "t", "explanation": "e"},
            headers=admin_headers,
        )
        _assert_error(response, 404, "No Apod Found With Id: 404404")

    def test_update_with_long_title_is_400(self, client: TestClient, admin_headers):
        response = client.put(
            "/api/apod/1",
            json={"title": "x" * 256, "explanation": "e"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestRoverPhotos:
    def test_returns_photos(self, client: TestClient, nasa, employee_headers):
        response = client.get(
            "/api/rover/curiosity/2015-05-30/fhaz", headers=employee_headers
        )
        assert response.status_code == 200
        photos = response.json()["photos"]
        assert photos[0]["camera"]["name"] == "FHAZ"
        assert photos[0]["rover"]["status"] == "active"
        assert nasa.calls == [("rover_photos", "curiosity", "2015-05-30", "fhaz")]

    def test_camera_is_case_insensitive(self, client: TestClient, nasa, employee_headers):
        response = client.get(
            "/api/rover/Curiosity/2015-05-30/NavCam", headers=employee_headers
        )
        assert response.status_code == 200
        assert nasa.calls == [("rover_photos", "curiosity", "2015-05-30", "NavCam")]

    def test_unknown_camera_is_404(self, client: TestClient, nasa, employee_headers):
        response = client.get(
            "/api/rover/curiosity/2015-05-30/wideangle", headers=employee_headers
        )
        _assert_error(response, 404, "wideangle Camera Does Not Exist")
        assert nasa.calls == []

    def test_anonymous_is_401(self, client: TestClient, nasa):
        response = client.get("/api/rover/curiosity/2015-05-30/fhaz")
        assert response.status_code == 401
