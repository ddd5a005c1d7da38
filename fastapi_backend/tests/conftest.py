from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from inventory_api.api.main import create_app
from inventory_api.core.config import Settings
from inventory_api.db.sqlalchemy import build_engine
from inventory_api.repositories import InMemoryItemRepository, SqlItemRepository
from inventory_api.services.inventory_service import InventoryService, UploadedPhoto
from inventory_api.storage.blob_store import LocalBlobStore

MEMORY_DB_URL = "sqlite:///:memory:"


def stored_files(root) -> list:
    return sorted(p.name for p in Path(root).iterdir())


def jpeg(content: bytes, filename: str = "photo.jpg") -> UploadedPhoto:
    return UploadedPhoto(filename=filename, content=content)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "public" / "uploads"


@pytest.fixture
def blob_store(upload_dir):
    return LocalBlobStore(str(upload_dir))


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    if request.param == "memory":
        yield InMemoryItemRepository()
        return
    engine = build_engine(MEMORY_DB_URL)
    repo = SqlItemRepository(engine)
    repo.create_schema()
    yield repo
    engine.dispose()


@pytest.fixture
def service(repository, blob_store):
    return InventoryService(repository, blob_store, lock_stripes=8)


@pytest.fixture(params=["memory", "sql"])
def settings(request, upload_dir):
    return Settings(
        _env_file=None,
        STORAGE_BACKEND=request.param,
        DATABASE_URL=MEMORY_DB_URL,
        UPLOAD_DIR=str(upload_dir),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
