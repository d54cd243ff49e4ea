"""
Shared fixtures: an in-memory Motor database, a spy blob store and an HTTP client
wired to the application through dependency overrides.
"""

import asyncio
import mimetypes
import os

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB", "fadlocar_test")
os.environ.setdefault("ACCESS_TOKEN_SECRET_KEY", "test-secret")
os.environ.setdefault("SUPER_ADMIN_NAME", "Admin")
os.environ.setdefault("SUPER_ADMIN_EMAIL", "admin@fadlocar.com")
os.environ.setdefault("SUPER_ADMIN_PASSWORD", "admin123")
os.environ.setdefault(
    "AZURE_STORAGE_CONNECTION_STRING",
    "DefaultEndpointsProtocol=http;AccountName=devstoreaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UWJOCOWWeWBGyFWcmc2K1SCfYWS8qFgM1Lw==;"
    "BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;",
)

from typing import Dict, List, Optional, Set

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.enums import UserRole
from app.collections.user_models import User
from app.core.dependencies import get_blob_store, get_blog_blob_store, get_mongo_db
from app.database.blob_storage import StoredBlob, build_stored_name
from app.database.session_mongo import ensure_indexes
from app.services import car_service
from main import app


class SpyBlobStore:
    """
    In-memory blob store recording every call. Uploads whose original name is listed
    in ``fail_put_names`` raise, those in ``slow_put_names`` hang until cancelled, and every
    delete raises when ``fail_delete`` is set.
    """

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.put_calls: List[str] = []
        self.delete_calls: List[str] = []
        self.fail_put_names: Set[str] = set()
        self.slow_put_names: Set[str] = set()
        self.fail_delete = False

    async def put(self, data, content_type, original_name, folder=""):
        self.put_calls.append(original_name)
        if original_name in self.fail_put_names:
            raise RuntimeError(f"upload of {original_name} failed")
        if original_name in self.slow_put_names:
            await asyncio.sleep(60)
        stored_name = build_stored_name(original_name, folder)
        self.blobs[stored_name] = data
        return StoredBlob(
            reference=f"https://blobs.test/cars/{stored_name}",
            stored_name=stored_name,
            size_bytes=len(data),
            content_type=content_type,
            original_name=original_name,
        )

    async def delete(self, stored_name):
        self.delete_calls.append(stored_name)
        if self.fail_delete:
            raise RuntimeError(f"delete of {stored_name} failed")
        return self.blobs.pop(stored_name, None) is not None


def make_upload(
    filename: str = "front.jpg",
    content_type: Optional[str] = None,
    size: int = 1024,
) -> schemas.ImageUpload:
    content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return schemas.ImageUpload(
        filename=filename, content_type=content_type, data=b"\xff\xd8\xff" + b"0" * (size - 3)
    )


def car_input(**overrides) -> schemas.CarCreate:
    data = {
        "name": "X5",
        "brand": "BMW",
        "type": "SUV",
        "price": 15000,
        "description": "Spacious family SUV",
    }
    data.update(overrides)
    return schemas.CarCreate(**data)


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["fadlocar_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def blob_store():
    return SpyBlobStore()


@pytest.fixture
def upload():
    return make_upload


@pytest.fixture
def car_payload():
    return car_input


@pytest.fixture
def admin_user():
    return User(
        name="Admin",
        email="admin@fadlocar.com",
        hashed_password="not-used",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def create_car(db, blob_store):
    """Factory creating a listing through the service, one image per file name."""

    async def _create(filenames: Optional[List[str]] = None, **overrides):
        images = [make_upload(name) for name in (filenames or ["front.jpg"])]
        return await car_service.create_car(db, blob_store, car_input(**overrides), images)

    return _create


def _build_client(db, blob_store, admin: Optional[User]):
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_blog_blob_store] = lambda: blob_store
    if admin is not None:
        app.dependency_overrides[get_current_admin] = lambda: admin
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(db, blob_store, admin_user):
    """Client authenticated as an administrator."""
    async with _build_client(db, blob_store, admin_user) as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(db, blob_store):
    """Client without authentication overrides."""
    async with _build_client(db, blob_store, None) as http_client:
        yield http_client
    app.dependency_overrides.clear()
