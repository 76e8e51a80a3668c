import io

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from starlette.datastructures import FormData, Headers, UploadFile

from image_service.config import settings
from image_service.database import Base, get_db
from image_service.main import app
from image_service.services.storage import PublicDisk
from image_service.utils.upload_request import FormUploadRequest

TEST_DB_URL = "sqlite:///./test_image_service.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage_root(tmp_path, monkeypatch):
    public = tmp_path / "public"
    temp = tmp_path / "temp"
    public.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(public))
    monkeypatch.setattr(settings, "TEMP_DIR", str(temp))
    monkeypatch.setattr(settings, "ASSET_BASE_URL", "/storage")
    return tmp_path


@pytest.fixture
def disk(storage_root):
    return PublicDisk(storage_root / "public", storage_root / "temp", "/storage")


@pytest.fixture
def client(storage_root):
    return TestClient(app)


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def make_upload(filename: str, data: bytes = PNG_BYTES, content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def make_request(fields: dict | None = None, max_size: int = 1024 * 1024) -> FormUploadRequest:
    return FormUploadRequest(FormData(list((fields or {}).items())), max_size=max_size)
