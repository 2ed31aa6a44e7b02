"""Tests for folder CRUD endpoints."""


class TestFolderCrud:

    def test_create_and_get_folder(self, client):
        resp = client.post("/api/folders", json={"name": "Projects", "x": 20, "y": 20})
        assert resp.status_code == 201
        folder = resp.json()
        assert folder["id"].startswith("folder-")
        assert (folder["name"], folder["x"], folder["y"]) == ("Projects", 20, 20)

        get_resp = client.get(f"/api/folders/{folder['id']}")
        assert get_resp.status_code == 200
        assert get_resp.json() == folder

    def test_list_folders(self, client, make_folder):
        make_folder("A", 20, 20)
        make_folder("B", 20, 120)
        names = [f["name"] for f in client.get("/api/folders").json()]
        assert names == ["A", "B"]

    def test_name_is_stripped(self, client):
        resp = client.post("/api/folders", json={"name": "  Work  "})
        assert resp.json()["name"] == "Work"

    def test_blank_name_returns_400_with_field(self, client):
        resp = client.post("/api/folders", json={"name": "   "})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "name"

    def test_missing_name_returns_400(self, client):
        resp = client.post("/api/folders", json={"x": 1})
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "name"

    def test_duplicate_name_returns_400(self, client, make_folder):
        make_folder("Projects")
        resp = client.post("/api/folders", json={"name": "Projects"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "DUPLICATE_NAME"
        assert resp.json()["details"]["field"] == "name"

    def test_get_unknown_folder_returns_404(self, client):
        resp = client.get("/api/folders/folder-missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "FOLDER_NOT_FOUND"


class TestFolderUpdate:

    def test_rename(self, client, make_folder):
        folder = make_folder("Old")
        resp = client.put(f"/api/folders/{folder['id']}", json={"name": "New"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "New"

    def test_move_keeps_name(self, client, make_folder):
        folder = make_folder("Stay")
        resp = client.put(f"/api/folders/{folder['id']}", json={"x": 300, "y": 40})
        assert resp.json() == {**folder, "x": 300, "y": 40}

    def test_rename_to_taken_name_returns_400(self, client, make_folder):
        make_folder("Taken")
        other = make_folder("Other", 20, 120)
        resp = client.put(f"/api/folders/{other['id']}", json={"name": "Taken"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "DUPLICATE_NAME"

    def test_rename_to_own_name_succeeds(self, client, make_folder):
        folder = make_folder("Same")
        resp = client.put(f"/api/folders/{folder['id']}", json={"name": "Same"})
        assert resp.status_code == 200

    def test_update_unknown_folder_returns_404(self, client):
        resp = client.put("/api/folders/folder-missing", json={"name": "X"})
        assert resp.status_code == 404


class TestFolderDelete:

    def test_delete_returns_204(self, client, make_folder):
        folder = make_folder()
        resp = client.delete(f"/api/folders/{folder['id']}")
        assert resp.status_code == 204
        assert client.get(f"/api/folders/{folder['id']}").status_code == 404

    def test_delete_unknown_folder_is_noop(self, client):
        resp = client.delete("/api/folders/folder-missing")
        assert resp.status_code == 204

    def test_delete_cascades_to_items(self, client, make_folder):
        folder = make_folder()
        client.post(f"/api/folders/{folder['id']}/items/note", json={"name": "n", "content": "c"})
        client.post(f"/api/folders/{folder['id']}/items/bookmark", json={"name": "b", "url": "example.com"})

        client.delete(f"/api/folders/{folder['id']}")

        resp = client.get(f"/api/folders/{folder['id']}/items")
        assert resp.status_code == 404
