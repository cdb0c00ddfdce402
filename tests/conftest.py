"""Test fixtures for API, pages, and database."""

from __future__ import annotations

import os
from pathlib import Path

TESTS_ROOT = Path(__file__).parent

# Set DATABASE_URL *before* importing nasa_gateway modules so the engine
# points at a throwaway file instead of ./data/nasa.db.
os.environ.setdefault("DATABASE_URL", "sqlite:///test_app.db")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from nasa_gateway.auth import token_service  # noqa: E402
from nasa_gateway.database import Base, SessionLocal, engine  # noqa: E402
from nasa_gateway.main import app  # noqa: E402
from nasa_gateway.schemas.apod import ApodOut  # noqa: E402
from nasa_gateway.schemas.rover import MarsRoverPhotosResponse  # noqa: E402
from nasa_gateway.security.policy import ADMIN, EMPLOYEE  # noqa: E402
from nasa_gateway.services.members import create_member  # noqa: E402
from nasa_gateway.services.nasa_client import get_nasa_client  # noqa: E402

TEST_DB_PATH = Path("test_app.db")

ADMIN_PASSWORD = "admin-secret"
EMPLOYEE_PASSWORD = "employee-secret"

SAMPLE_APOD = {
    "date": "2024-05-01",
    "title": "Aurora over Iceland",
    "explanation": "Curtains of green light above a frozen lake.",
    "url": "https://apod.nasa.gov/apod/image/2405/aurora_1024.jpg",
    "hdurl": "https://apod.nasa.gov/apod/image/2405/aurora.jpg",
    "copyright": "Jane Doe",
}

SAMPLE_PHOTOS = {
    "photos": [
        {
            "id": 102693,
            "sol": 1000,
            "camera": {
                "id": 20,
                "name": "FHAZ",
                "rover_id": 5,
                "full_name": "Front Hazard Avoidance Camera",
            },
            "img_src": "http://mars.jpl.nasa.gov/msl-raw-images/FLB_486265257.JPG",
            "earth_date": "2015-05-30",
            "rover": {
                "id": 5,
                "name": "Curiosity",
                "landing_date": "2012-08-06",
                "launch_date": "2011-11-26",
                "status": "active",
            },
        }
    ]
}


class FakeNasaClient:
    """Stands in for the live NASA API; records every call it receives."""

    def __init__(self) -> None:
        self.apod = ApodOut.model_validate(SAMPLE_APOD)
        self.photos = MarsRoverPhotosResponse.model_validate(SAMPLE_PHOTOS)
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    async def get_apod(self) -> ApodOut:
        self.calls.append(("apod",))
        if self.error is not None:
            raise self.error
        return self.apod

    async def get_rover_photos(self, rover, earth_date, cameras):
        self.calls.append(("rover_photos", rover, earth_date, cameras))
        if self.error is not None:
            raise self.error
        return self.photos


@pytest.fixture(scope="session")
def client():
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture
def db_session(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        # Ensure database state is isolated between tests
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture
def browser(client):
    """A cookie-isolated client for login and page flows."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def nasa(client):
    fake = FakeNasaClient()
    app.dependency_overrides[get_nasa_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_nasa_client, None)


@pytest.fixture
def members(db_session):
    create_member(db_session, "admin", ADMIN_PASSWORD, [EMPLOYEE, ADMIN])
    create_member(db_session, "employee", EMPLOYEE_PASSWORD, [EMPLOYEE])
    create_member(db_session, "retired", "retired-secret", [EMPLOYEE], active=False)
    return {"admin": ADMIN_PASSWORD, "employee": EMPLOYEE_PASSWORD}


def _bearer(user_id: str, *roles: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_service.issue(user_id, roles)}"}


@pytest.fixture
def bearer():
    """Build an Authorization header for any principal and roles."""
    return _bearer


@pytest.fixture
def admin_headers():
    return _bearer("admin", EMPLOYEE, ADMIN)


@pytest.fixture
def employee_headers():
    return _bearer("employee", EMPLOYEE)


@pytest.fixture
def sample_apod():
    return dict(SAMPLE_APOD)
