"""Tests for document upload, rename and delete."""

import logging

import pytest

from deskspace.models import DocMessage
from deskspace.services.document_service import display_name_for


def _upload(client, data, filename="Q3_board-report.pdf", content_type="application/pdf"):
    return client.post("/api/documents/upload", files={"file": (filename, data, content_type)})


class TestDisplayName:

    @pytest.mark.parametrize("filename, expected", [
        ("Q3_board-report.pdf", "Q3 board report"),
        ("notes.PDF", "notes"),
        ("  .pdf", "Untitled document"),
        ("dir/sub/plan__v2.pdf", "plan v2"),
    ])
    def test_derives_name_from_filename(self, filename, expected):
        assert display_name_for(filename) == expected


class TestUpload:

    def test_upload_pdf(self, client, pdf_bytes, storage):
        resp = _upload(client, pdf_bytes)
        assert resp.status_code == 201
        doc = resp.json()
        assert doc["id"].startswith("doc-")
        assert doc["name"] == "Q3 board report"
        assert doc["originalName"] == "Q3_board-report.pdf"
        assert "Hello Deskspace" in doc["content"]
        assert storage.objects[doc["fileId"]] == pdf_bytes

    def test_non_pdf_rejected(self, client):
        resp = _upload(client, b"just text", filename="notes.txt", content_type="text/plain")
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "file"

    def test_pdf_extension_with_garbage_rejected(self, client):
        resp = _upload(client, b"not really a pdf", filename="fake.pdf")
        assert resp.status_code == 400

    def test_upload_without_storage_keeps_text(self, client, pdf_bytes, storage):
        storage.configured = False
        resp = _upload(client, pdf_bytes)
        assert resp.status_code == 201
        assert resp.json()["fileUrl"] is None
        assert storage.objects == {}

    def test_upload_without_storage_logs_original_name(self, client, pdf_bytes, storage, caplog):
        storage.configured = False
        with caplog.at_level(logging.INFO, logger="deskspace.services.document_service"):
            resp = _upload(client, pdf_bytes)
        assert resp.status_code == 201
        records = [r for r in caplog.records if "keeping document text only" in r.getMessage()]
        assert records and records[0].original_name == "Q3_board-report.pdf"

    def test_list_omits_content(self, client, pdf_bytes):
        _upload(client, pdf_bytes)
        docs = client.get("/api/documents").json()
        assert len(docs) == 1
        assert "content" not in docs[0]


class TestRenameAndDelete:

    def test_rename(self, client, pdf_bytes):
        doc = _upload(client, pdf_bytes).json()
        resp = client.patch(f"/api/documents/{doc['id']}/rename", json={"name": "Board deck"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Board deck"

    def test_rename_blank_returns_400(self, client, pdf_bytes):
        doc = _upload(client, pdf_bytes).json()
        resp = client.patch(f"/api/documents/{doc['id']}/rename", json={"name": " "})
        assert resp.status_code == 400

    def test_rename_unknown_returns_404(self, client):
        resp = client.patch("/api/documents/doc-missing/rename", json={"name": "x"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "DOCUMENT_NOT_FOUND"

    def test_delete_cascades_messages_and_blob(self, client, db, pdf_bytes, storage):
        doc = _upload(client, pdf_bytes).json()
        client.post("/api/chat/send", json={"content": "summarise", "referencedDocIds": [doc["id"]]})
        assert db.query(DocMessage).filter(DocMessage.document_id == doc["id"]).count() == 2

        resp = client.delete(f"/api/documents/{doc['id']}")

        assert resp.status_code == 204
        assert client.get(f"/api/documents/{doc['id']}").status_code == 404
        assert db.query(DocMessage).filter(DocMessage.document_id == doc["id"]).count() == 0
        assert storage.deleted == [doc["fileId"]]

    def test_delete_unknown_is_noop(self, client):
        assert client.delete("/api/documents/doc-missing").status_code == 204
