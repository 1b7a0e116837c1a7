from datetime import date, timedelta

from fleet.services.storage_service import StorageError, storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestDrivers:
    def _payload(self, **overrides):
        payload = {
            "name": "Ana Souza",
            "cpf": "123.456.789-00",
            "birth_date": "1988-03-14",
            "phone": "11988887777",
            "cnh_number": "01234567890",
            "cnh_category": "D",
            "cnh_expiration_date": "2031-01-01",
            "admission_date": "2020-02-01",
        }
        payload.update(overrides)
        return payload

    def _create(self, client, h, **overrides):
        return client.post("/api/v1/drivers", json=self._payload(**overrides), headers=h)

    def test_create_driver(self, client, auth):
        r = self._create(client, auth)
        assert r.status_code == 201
        data = r.json()
        assert data["status"] == "active"
        assert data["cnh_status"] == "valid"
        assert data["photo_url"] is None

    def test_cnh_status_reflects_expiration(self, client, auth):
        soon = (date.today() + timedelta(days=10)).isoformat()
        r = self._create(client, auth, cnh_expiration_date=soon)
        assert r.json()["cnh_status"] == "approaching"

        past = (date.today() - timedelta(days=1)).isoformat()
        r = self._create(client, auth, name="Bruno", cnh_expiration_date=past)
        assert r.json()["cnh_status"] == "expired"

    def test_invalid_email(self, client, auth):
        r = self._create(client, auth, email="not-an-email")
        assert r.status_code == 422
        assert r.json()["detail"][0]["loc"] == ["body", "email"]

    def test_blank_email_stored_as_null(self, client, auth):
        r = self._create(client, auth, email="  ")
        assert r.status_code == 201
        assert r.json()["email"] is None

    def test_invalid_cnh_category(self, client, auth):
        assert self._create(client, auth, cnh_category="Z").status_code == 422

    def test_list_combined_filters(self, client, auth):
        self._create(client, auth, name="Ana", cnh_category="B")
        self._create(client, auth, name="Bruno", cnh_category="D")
        self._create(client, auth, name="Carla", cnh_category="B", status="vacation")

        r = client.get("/api/v1/drivers", params={"status": "active", "cnh_category": "B"}, headers=auth)
        assert [d["name"] for d in r.json()["drivers"]] == ["Ana"]

        # Cleared filters bring every row back.
        r = client.get("/api/v1/drivers", headers=auth)
        assert [d["name"] for d in r.json()["drivers"]] == ["Ana", "Bruno", "Carla"]

    def test_update_driver(self, client, auth):
        driver_id = self._create(client, auth).json()["id"]
        r = client.put(f"/api/v1/drivers/{driver_id}", json={"status": "leave", "phone": "11911112222"}, headers=auth)
        assert r.status_code == 200
        assert r.json()["status"] == "leave"
        assert r.json()["name"] == "Ana Souza"

    def test_photo_upload_and_replace(self, client, auth, tmp_data):
        driver_id = self._create(client, auth).json()["id"]
        r = client.post(f"/api/v1/drivers/{driver_id}/photo",
                        files={"file": ("me.png", PNG, "image/png")}, headers=auth)
        assert r.status_code == 200
        first_url = r.json()["photo_url"]
        assert "/files/driver-photos/" in first_url
        assert "token=" in first_url

        r = client.get(first_url)
        assert r.status_code == 200
        assert r.content == PNG

        r = client.post(f"/api/v1/drivers/{driver_id}/photo",
                        files={"file": ("me2.png", PNG + b"2", "image/png")}, headers=auth)
        assert r.status_code == 200
        photos = list((tmp_data / "storage" / "driver-photos").rglob("*.png"))
        assert len(photos) == 1

    def test_photo_rejects_non_images(self, client, auth):
        driver_id = self._create(client, auth).json()["id"]
        r = client.post(f"/api/v1/drivers/{driver_id}/photo",
                        files={"file": ("cv.pdf", b"%PDF", "application/pdf")}, headers=auth)
        assert r.status_code == 400

    def test_photo_size_limit(self, client, auth, monkeypatch):
        from fleet.config import settings
        monkeypatch.setattr(settings, "max_photo_bytes", 10)
        driver_id = self._create(client, auth).json()["id"]
        r = client.post(f"/api/v1/drivers/{driver_id}/photo",
                        files={"file": ("me.png", PNG, "image/png")}, headers=auth)
        assert r.status_code == 413

    def test_remove_photo(self, client, auth):
        driver_id = self._create(client, auth).json()["id"]
        assert client.delete(f"/api/v1/drivers/{driver_id}/photo", headers=auth).status_code == 404
        client.post(f"/api/v1/drivers/{driver_id}/photo",
                    files={"file": ("me.png", PNG, "image/png")}, headers=auth)
        r = client.delete(f"/api/v1/drivers/{driver_id}/photo", headers=auth)
        assert r.status_code == 200
        assert r.json()["photo_url"] is None

    def test_remove_photo_storage_failure(self, client, auth, monkeypatch):
        driver_id = self._create(client, auth).json()["id"]
        client.post(f"/api/v1/drivers/{driver_id}/photo",
                    files={"file": ("me.png", PNG, "image/png")}, headers=auth)

        def broken_delete(bucket, path):
            raise StorageError("disk unavailable")

        monkeypatch.setattr(storage, "delete", broken_delete)
        r = client.delete(f"/api/v1/drivers/{driver_id}/photo", headers=auth)
        assert r.status_code == 502
        assert client.get(f"/api/v1/drivers/{driver_id}", headers=auth).json()["photo_url"] is not None

    def test_delete_driver(self, client, auth):
        driver_id = self._create(client, auth).json()["id"]
        assert client.delete(f"/api/v1/drivers/{driver_id}", headers=auth).status_code == 200
        assert client.get(f"/api/v1/drivers/{driver_id}", headers=auth).status_code == 404

    def test_delete_driver_removes_photo(self, client, auth, tmp_data):
        driver_id = self._create(client, auth).json()["id"]
        client.post(f"/api/v1/drivers/{driver_id}/photo",
                    files={"file": ("me.png", PNG, "image/png")}, headers=auth)
        assert client.delete(f"/api/v1/drivers/{driver_id}", headers=auth).status_code == 200
        assert list((tmp_data / "storage" / "driver-photos").rglob("*.png")) == []

    def test_delete_driver_storage_failure_keeps_driver(self, client, auth, monkeypatch):
        driver_id = self._create(client, auth).json()["id"]
        client.post(f"/api/v1/drivers/{driver_id}/photo",
                    files={"file": ("me.png", PNG, "image/png")}, headers=auth)

        def broken_delete(bucket, path):
            raise StorageError("disk unavailable")

        monkeypatch.setattr(storage, "delete", broken_delete)
        r = client.delete(f"/api/v1/drivers/{driver_id}", headers=auth)
        assert r.status_code == 502
        r = client.get(f"/api/v1/drivers/{driver_id}", headers=auth)
        assert r.status_code == 200
        assert r.json()["photo_url"] is not None

    def test_delete_blocked_by_documents(self, client, auth):
        driver_id = self._create(client, auth).json()["id"]
        client.post("/api/v1/documents", json={
            "document_name": "CNH", "document_type": "cnh",
            "entity_type": "driver", "entity_id": driver_id,
        }, headers=auth)
        assert client.delete(f"/api/v1/drivers/{driver_id}", headers=auth).status_code == 409
