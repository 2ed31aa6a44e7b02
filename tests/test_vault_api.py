"""Tests for vault endpoints and the per-type payload invariant."""


class TestVault:

    def test_create_password(self, client):
        resp = client.post(
            "/api/vault",
            json={"name": "Email", "type": "password", "username": "me", "password": "s3cret"},
        )
        assert resp.status_code == 201
        item = resp.json()
        assert item["id"].startswith("vault-")
        assert (item["username"], item["password"]) == ("me", "s3cret")
        assert item["apiKey"] is None and item["value"] is None

    def test_create_api_key_with_camel_case(self, client):
        resp = client.post("/api/vault", json={"name": "OpenAI", "type": "apikey", "apiKey": "sk-abc"})
        assert resp.status_code == 201
        assert resp.json()["apiKey"] == "sk-abc"

    def test_null_fields_of_other_types_are_ignored(self, client):
        resp = client.post(
            "/api/vault",
            json={"name": "Pin", "type": "value", "value": "1234", "username": None, "apiKey": None},
        )
        assert resp.status_code == 201

    def test_fields_of_other_type_rejected(self, client):
        resp = client.post("/api/vault", json={"name": "X", "type": "value", "value": "1", "apiKey": "k"})
        assert resp.status_code == 400

    def test_missing_required_field_rejected(self, client):
        resp = client.post("/api/vault", json={"name": "X", "type": "password"})
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "password"

    def test_unknown_type_rejected(self, client):
        resp = client.post("/api/vault", json={"name": "X", "type": "ssh", "value": "1"})
        assert resp.status_code == 400

    def test_update_switching_type_clears_old_fields(self, client):
        item = client.post(
            "/api/vault",
            json={"name": "Email", "type": "password", "username": "me", "password": "pw"},
        ).json()
        resp = client.put(f"/api/vault/{item['id']}", json={"name": "Token", "type": "apikey", "apiKey": "k"})
        assert resp.status_code == 200
        updated = resp.json()
        assert updated["type"] == "apikey"
        assert updated["apiKey"] == "k"
        assert updated["username"] is None and updated["password"] is None

    def test_get_unknown_returns_404(self, client):
        resp = client.get("/api/vault/vault-missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "VAULT_ITEM_NOT_FOUND"

    def test_delete_unknown_is_noop(self, client):
        assert client.delete("/api/vault/vault-missing").status_code == 204
