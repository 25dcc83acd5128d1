"""Shared fixtures: in-memory database, recording media store, test client."""

import os

# Settings are read from the environment, so defaults go in before any import
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-api-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-api-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from catalog.core.config import Settings
from catalog.main import create_app
from catalog.storage.media_store import HostedImage


class FakeMediaStore:
    """Records every call so tests can assert on attempted side effects."""

    def __init__(self):
        self.uploads: list[dict] = []
        self.destroyed: list[str] = []
        self.pings = 0
        self.upload_error: Exception | None = None
        self.destroy_error: Exception | None = None
        self.ping_error: Exception | None = None

    async def upload(self, content: bytes, filename: str, content_type: str) -> HostedImage:
        if self.upload_error:
            raise self.upload_error
        self.uploads.append(
            {"filename": filename, "content_type": content_type, "size": len(content)}
        )
        n = len(self.uploads)
        return HostedImage(
            url=f"https://res.cloudinary.com/demo/image/upload/v1/product-images/img{n}.png",
            public_id=f"product-images/img{n}",
        )

    async def destroy(self, public_id: str) -> None:
        self.destroyed.append(public_id)
        if self.destroy_error:
            raise self.destroy_error

    async def ping(self) -> None:
        self.pings += 1
        if self.ping_error:
            raise self.ping_error


@pytest.fixture
def settings():
    return Settings(
        cloudinary_cloud_name="demo",
        cloudinary_api_key="test-api-key",
        cloudinary_api_secret="test-api-secret",
        database_url="sqlite://",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def app(settings, engine, media_store):
    return create_app(settings, engine=engine, media_store=media_store)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_product(client):
    """Create a product through the API and return the response body."""

    def _create(image: tuple | None = None, **fields):
        data = {"name": "Mug", "price": "9.99", "category": "kitchen"}
        data.update(fields)
        files = {"image": image} if image else None
        response = client.post("/api/products", data=data, files=files)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def png():
    return ("photo.png", b"\x89PNG\r\n\x1a\n" + b"0" * 64, "image/png")
