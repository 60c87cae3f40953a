import os

# Settings are read at import time: point the app at throwaway resources
# before anything from places_api.config is imported.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_KEY"] = "test-signing-key-with-at-least-32-bytes"
os.environ["MAP_API_KEY"] = "test-map-key"

import io  # noqa: E402
from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from places_api.config import settings  # noqa: E402
from places_api.database import build_engine, get_session  # noqa: E402
from places_api.errors import GeocodeFailed  # noqa: E402
from places_api.main import app  # noqa: E402
from places_api.services.geocoder import Coordinates, get_geocoder  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: is pinned to one connection so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. Tables created per test and dropped afterwards
# 4. App dependencies overridden to use test_engine and FakeGeocoder
test_engine = build_engine(TEST_DATABASE_URL, echo=False)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

KNOWN_ADDRESSES: Dict[str, Coordinates] = {
    "20 W 34th St, New York, NY 10001": Coordinates(lat=40.7484405, lng=-73.9856644),
    "Champ de Mars, 5 Av. Anatole France, 75007 Paris": Coordinates(lat=48.8583701, lng=2.2944813),
}


class FakeGeocoder:
    """Resolves a fixed set of addresses; anything else behaves like zero results."""

    def __init__(self, addresses: Optional[Dict[str, Coordinates]] = None):
        self.addresses = dict(KNOWN_ADDRESSES if addresses is None else addresses)
        self.calls: List[str] = []

    def geocode(self, address: str) -> Coordinates:
        self.calls.append(address)
        if address not in self.addresses:
            raise GeocodeFailed("No results for address")
        return self.addresses[address]


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Every test writes uploads into its own temporary directory."""
    directory = tmp_path / "uploads" / "images"
    directory.mkdir(parents=True)
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory


@pytest.fixture(name="session")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture(name="client")
def client_fixture(session: Session, geocoder: FakeGeocoder):
    """Provide a test client with overridden database session and geocoder"""
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_geocoder] = lambda: geocoder

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


def image_file(name: str = "photo.png", content_type: str = "image/png", content: bytes = PNG_BYTES):
    """Multipart ``files`` entry for TestClient requests."""
    return {"image": (name, io.BytesIO(content), content_type)}


def signup_user(client: TestClient, name: str = "Ada", email: str = "ada@example.com", password: str = "secret123"):
    """Sign up through the API and return the JSON body (userId, email, token)."""
    response = client.post(
        "/api/users/signup",
        data={"name": name, "email": email, "password": password},
        files=image_file("avatar.png"),
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def create_place(
    client: TestClient,
    token: str,
    title: str = "Empire State Building",
    description: str = "One of the most famous skyscrapers in the world",
    address: str = "20 W 34th St, New York, NY 10001",
):
    return client.post(
        "/api/places",
        data={"title": title, "description": description, "address": address},
        files=image_file(),
        headers=auth_header(token),
    )


def stored_files(directory) -> List[str]:
    return sorted(p.name for p in directory.iterdir())
