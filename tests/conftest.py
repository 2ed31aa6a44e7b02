"""Shared test fixtures for the Deskspace test suite.

Each test gets its own file-backed SQLite database under ``tmp_path`` and an
application built by ``create_app`` with in-memory fakes for object storage,
blob downloads and the completion service. Nothing talks to the network.
"""

import os

# Quiet, deterministic settings before any deskspace import.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FORMAT"] = "text"
os.environ["CHAT_MODEL"] = ""
os.environ["STORAGE_ENDPOINT"] = ""

from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from deskspace.core.config import Settings
from deskspace.database import Database
from deskspace.exceptions import ExternalServiceError, ServiceFailure
from deskspace.main import create_app
from deskspace.services.object_storage import StoredObject


class FakeStorage:
    """In-memory object storage."""

    def __init__(self):
        self.configured = True
        self.objects: Dict[str, bytes] = {}
        self.deleted: List[str] = []
        self.fail_deletes = False
        self._counter = 0

    def is_configured(self) -> bool:
        return self.configured

    def upload(self, data: bytes, filename: str, folder: str, content_type: Optional[str] = None) -> StoredObject:
        self._counter += 1
        object_id = f"{folder}/{self._counter}-{filename}"
        self.objects[object_id] = data
        return StoredObject(url=f"https://blobs.test/{object_id}", id=object_id)

    def delete(self, object_id: str) -> None:
        if self.fail_deletes:
            raise ExternalServiceError("storage", "Could not reach object storage during delete",
                                       category=ServiceFailure.UNREACHABLE)
        self.deleted.append(object_id)
        self.objects.pop(object_id, None)


class FakeFetcher:
    """Serves blobs by URL; unknown URLs fail like a deleted blob."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.requested: List[str] = []

    def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self.blobs:
            raise ExternalServiceError("storage", "Blob download returned HTTP 404")
        return self.blobs[url]


class FakeCompletion:
    """Records every call and answers from a queue, a callable, or a default."""

    def __init__(self):
        self.configured = True
        self.calls: List[Dict[str, Any]] = []
        self.replies: List[str] = []
        self.responder: Optional[Callable[[List[Dict[str, Any]]], str]] = None
        self.error: Optional[ExternalServiceError] = None

    def is_configured(self) -> bool:
        return self.configured

    def complete(self, messages, vision: bool = False, max_tokens=None, temperature=None) -> str:
        self.calls.append({"messages": messages, "vision": vision, "temperature": temperature})
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        if self.responder is not None:
            return self.responder(messages)
        return "ok"


@pytest.fixture()
def database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'deskspace-test.db'}")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture()
def db(database):
    """Per-test database session."""
    with database.session() as session:
        yield session


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def fetcher():
    return FakeFetcher()


@pytest.fixture()
def llm():
    return FakeCompletion()


@pytest.fixture()
def test_settings():
    return Settings(_env_file=None, rate_limit_per_minute=0, chat_model="test/model")


@pytest.fixture()
def app(test_settings, database, storage, llm, fetcher):
    return create_app(
        settings=test_settings,
        database=database,
        storage=storage,
        llm=llm,
        fetcher=fetcher,
        seed=False,
    )


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_folder(client):
    def _make(name: str = "Projects", x: int = 20, y: int = 20) -> Dict[str, Any]:
        resp = client.post("/api/folders", json={"name": name, "x": x, "y": y})
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture()
def pdf_bytes():
    """A minimal one-page PDF with the text "Hello Deskspace"."""
    return _build_pdf("Hello Deskspace")


def _build_pdf(text: str) -> bytes:
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)
