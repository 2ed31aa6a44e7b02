"""Tests for the root and health endpoints."""


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Deskspace API"
    assert body["status"] == "running"


def test_health_reports_counts(client, make_folder):
    make_folder("Projects")
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["db"] == "ok"
    assert body["folder_count"] == 1
    assert body["document_count"] == 0


def test_request_id_is_echoed(client):
    resp = client.get("/api/folders", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
    assert resp.headers["X-Response-Time"].endswith("ms")


class TestSeeding:

    def test_default_folders_seeded_on_startup(self, test_settings, database, storage, llm, fetcher):
        from fastapi.testclient import TestClient
        from deskspace.main import create_app

        app = create_app(settings=test_settings, database=database, storage=storage, llm=llm, fetcher=fetcher)
        with TestClient(app) as c:
            folders = c.get("/api/folders").json()

        by_name = {f["name"]: (f["x"], f["y"]) for f in folders}
        assert by_name == {"Projects": (20, 20), "Documents": (20, 120), "Photos": (20, 220)}

    def test_seed_skipped_when_folders_exist(self, db):
        from deskspace.core.seeder import seed_default_folders
        from deskspace.services.folder_service import FolderService

        FolderService(db).create_folder("Mine")
        assert seed_default_folders(db) == 0
        assert [f.name for f in FolderService(db).list_folders()] == ["Mine"]
