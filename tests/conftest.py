"""Shared fixtures: in-memory database and a fake extractor."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from meter_reader.core.database import Base, get_db
from meter_reader.main import app
from meter_reader.services.extraction import get_extractor

# 1x1-ish PNG signature, enough for a syntactically valid payload
PNG_IMAGE = "data:image/png;base64,iVBORw0KGgo="
JPEG_IMAGE = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="


class FakeExtractor:
    """Extractor returning canned text and recording every call."""

    def __init__(self, text: str = '{"value": "12345"}') -> None:
        self.text = text
        self.error: Exception | None = None
        self.calls: list[tuple[bytes, str, str]] = []

    def extract(self, image: bytes, mime_type: str, prompt: str) -> str:
        self.calls.append((image, mime_type, prompt))
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def client(test_db, extractor):
    """Create a test client with database and extractor overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_extractor] = lambda: extractor
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload_body(**overrides) -> dict:
    """Helper: a valid upload body with optional field overrides."""
    body = {
        "image": PNG_IMAGE,
        "customer_code": "CUST-001",
        "measure_datetime": "2024-03-15T10:00:00Z",
        "measure_type": "WATER",
    }
    body.update(overrides)
    return body
