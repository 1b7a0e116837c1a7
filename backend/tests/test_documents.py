from datetime import date, timedelta

from fleet.services.storage_service import StorageError, storage


class TestDocuments:
    def _vehicle(self, client, h, plate="ABC1D23", model="Actros"):
        r = client.post("/api/v1/vehicles", json={"plate": plate, "brand": "Mercedes", "model": model}, headers=h)
        return r.json()["id"]

    def _driver(self, client, h, name="Ana Souza"):
        r = client.post("/api/v1/drivers", json={
            "name": name, "cpf": "123.456.789-00", "birth_date": "1988-03-14", "phone": "11988887777",
            "cnh_number": "0123", "cnh_category": "B", "cnh_expiration_date": "2031-01-01",
            "admission_date": "2020-02-01",
        }, headers=h)
        return r.json()["id"]

    def _create(self, client, h, entity_type, entity_id, **overrides):
        payload = {
            "document_name": "CRLV 2024",
            "document_type": "crlv",
            "entity_type": entity_type,
            "entity_id": entity_id,
        }
        payload.update(overrides)
        return client.post("/api/v1/documents", json=payload, headers=h)

    def _upload(self, client, h, doc_id, content=b"%PDF-1.4 fake", name="crlv.pdf"):
        return client.put(f"/api/v1/documents/{doc_id}/file",
                          files={"file": (name, content, "application/pdf")}, headers=h)

    def test_create_vehicle_document(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        r = self._create(client, auth, "vehicle", vehicle_id)
        assert r.status_code == 201
        data = r.json()
        assert data["entity_id"] == vehicle_id
        assert data["entity_label"] == "ABC1D23 (Actros)"
        assert data["status_validity"] == "not_applicable"
        assert data["has_file"] is False

    def test_driver_document_label(self, client, auth):
        driver_id = self._driver(client, auth)
        r = self._create(client, auth, "driver", driver_id, document_type="cnh", document_name="CNH")
        assert r.json()["entity_label"] == "Ana Souza (123.456.789-00)"

    def test_association_must_exist_in_tenant(self, client, auth, login):
        assert self._create(client, auth, "vehicle", "ghost").status_code == 400

        other = login("other@fleet.test", "Other Co")
        foreign_vehicle = self._vehicle(client, other)
        assert self._create(client, auth, "vehicle", foreign_vehicle).status_code == 400

    def test_vehicle_id_is_not_a_driver(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        assert self._create(client, auth, "driver", vehicle_id).status_code == 400

    def test_other_type_requires_description(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        r = self._create(client, auth, "vehicle", vehicle_id, document_type="other")
        assert r.status_code == 422

        r = self._create(client, auth, "vehicle", vehicle_id, document_type="other",
                         custom_document_type_description="  Tachograph  ")
        assert r.status_code == 201
        assert r.json()["custom_document_type_description"] == "Tachograph"

        r = self._create(client, auth, "vehicle", vehicle_id, custom_document_type_description="ignored")
        assert r.json()["custom_document_type_description"] is None

    def test_update_to_other_requires_description(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        r = client.put(f"/api/v1/documents/{doc_id}", json={"document_type": "other"}, headers=auth)
        assert r.status_code == 400

    def test_reassign_to_driver(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        driver_id = self._driver(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]

        r = client.put(f"/api/v1/documents/{doc_id}", json={
            "entity_type": "driver", "entity_id": driver_id,
        }, headers=auth)
        assert r.status_code == 200
        assert r.json()["entity_type"] == "driver"
        assert r.json()["entity_id"] == driver_id
        assert client.delete(f"/api/v1/vehicles/{vehicle_id}", headers=auth).status_code == 200

    def test_status_validity(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        today = date.today()
        cases = {
            "expired": today - timedelta(days=1),
            "approaching": today + timedelta(days=30),
            "valid": today + timedelta(days=31),
        }
        for status, exp in cases.items():
            r = self._create(client, auth, "vehicle", vehicle_id, document_name=status,
                             expiration_date=exp.isoformat())
            assert r.json()["status_validity"] == status

        for status in cases:
            r = client.get("/api/v1/documents", params={"status": status}, headers=auth)
            data = r.json()
            assert data["total"] == 1
            assert data["documents"][0]["document_name"] == status

    def test_list_by_entity(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        other_vehicle = self._vehicle(client, auth, plate="XYZ9A87")
        driver_id = self._driver(client, auth)
        self._create(client, auth, "vehicle", vehicle_id)
        self._create(client, auth, "vehicle", other_vehicle)
        self._create(client, auth, "driver", driver_id, document_type="cnh")

        r = client.get("/api/v1/documents", params={"entity_type": "vehicle", "entity_id": vehicle_id},
                       headers=auth)
        assert r.json()["total"] == 1
        assert r.json()["documents"][0]["entity_label"] == "ABC1D23 (Actros)"

        r = client.get("/api/v1/documents", params={"entity_type": "driver"}, headers=auth)
        assert r.json()["total"] == 1

        r = client.get("/api/v1/documents", params={"entity_id": vehicle_id}, headers=auth)
        assert r.status_code == 400

    def test_upload_download_and_signed_url(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]

        r = self._upload(client, auth, doc_id)
        assert r.status_code == 200
        assert r.json()["has_file"] is True
        assert r.json()["file_name"] == "crlv.pdf"
        assert r.json()["file_size"] == len(b"%PDF-1.4 fake")

        r = client.get(f"/api/v1/documents/{doc_id}/download", headers=auth)
        assert r.status_code == 200
        assert r.content == b"%PDF-1.4 fake"

        r = client.get(f"/api/v1/documents/{doc_id}/file-url", headers=auth)
        assert r.status_code == 200
        url = r.json()["url"]
        assert client.get(url).content == b"%PDF-1.4 fake"

    def test_replacing_file_releases_old_one(self, client, auth, tmp_data):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        self._upload(client, auth, doc_id, b"first")
        self._upload(client, auth, doc_id, b"second", name="crlv-2.pdf")

        files = [p for p in (tmp_data / "storage" / "document-files").rglob("*") if p.is_file()]
        assert len(files) == 1
        assert files[0].read_bytes() == b"second"

    def test_upload_limits(self, client, auth, monkeypatch):
        from fleet.config import settings
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        assert self._upload(client, auth, doc_id, b"").status_code == 400

        monkeypatch.setattr(settings, "max_upload_bytes", 4)
        assert self._upload(client, auth, doc_id, b"too large").status_code == 413

    def test_remove_file(self, client, auth):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        assert client.delete(f"/api/v1/documents/{doc_id}/file", headers=auth).status_code == 404

        self._upload(client, auth, doc_id)
        r = client.delete(f"/api/v1/documents/{doc_id}/file", headers=auth)
        assert r.status_code == 200
        assert r.json()["has_file"] is False
        assert client.get(f"/api/v1/documents/{doc_id}/download", headers=auth).status_code == 404

    def test_delete_document_removes_file(self, client, auth, tmp_data):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        self._upload(client, auth, doc_id)

        r = client.delete(f"/api/v1/documents/{doc_id}", headers=auth)
        assert r.status_code == 200
        assert client.get(f"/api/v1/documents/{doc_id}", headers=auth).status_code == 404
        files = [p for p in (tmp_data / "storage" / "document-files").rglob("*") if p.is_file()]
        assert files == []

    def test_delete_keeps_row_when_file_delete_fails(self, client, auth, monkeypatch):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        self._upload(client, auth, doc_id)

        def broken_delete(bucket, path):
            raise StorageError("disk unavailable")

        monkeypatch.setattr(storage, "delete", broken_delete)
        r = client.delete(f"/api/v1/documents/{doc_id}", headers=auth)
        assert r.status_code == 502

        r = client.get(f"/api/v1/documents/{doc_id}", headers=auth)
        assert r.status_code == 200
        assert r.json()["has_file"] is True

    def test_other_tenant_cannot_read_document(self, client, auth, login):
        vehicle_id = self._vehicle(client, auth)
        doc_id = self._create(client, auth, "vehicle", vehicle_id).json()["id"]
        other = login("other@fleet.test", "Other Co")
        assert client.get(f"/api/v1/documents/{doc_id}", headers=other).status_code == 404
        assert client.get(f"/api/v1/documents/{doc_id}/file-url", headers=other).status_code == 404
