"""Attachments, evidence and the file storage helper."""

import re
import uuid
from pathlib import Path

import pytest
from fastapi import HTTPException

from contractflow.services import attachment_service, evidence_service, file_storage

PDF_BYTES = b"%PDF-1.4 contract body"
STORAGE_PATH_RE = re.compile(r"^\d{4}/\d{2}/[0-9a-f-]{36}\.pdf$")


def _upload(client, url, name="contract.pdf", content=PDF_BYTES, mime="application/pdf", data=None):
    return client.post(url, files={"file": (name, content, mime)}, data=data or {})


class TestFileStorage:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("report.PDF", ".pdf"),
            ("archive.tar.gz", ".gz"),
            ("no_extension", ""),
            (None, ""),
            ("weird.ex$e", ""),
            ("C:\\docs\\scan.png", ".png"),
        ],
    )
    def test_safe_extension(self, filename, expected):
        assert file_storage._safe_extension(filename) == expected

    def test_save_resolve_delete(self, tmp_path):
        rel = file_storage.save_upload(b"abc", "a.txt", tmp_path)
        full = file_storage.resolve(rel, tmp_path)
        assert full.read_bytes() == b"abc"
        assert file_storage.delete_file(rel, tmp_path) is True
        assert file_storage.delete_file(rel, tmp_path) is False

    def test_resolve_rejects_escape(self, tmp_path):
        with pytest.raises(HTTPException) as exc_info:
            file_storage.resolve("../outside.txt", tmp_path)
        assert exc_info.value.status_code == 404


class TestAttachments:
    def test_upload_list_download(self, client, contract_id, settings):
        resp = _upload(client, f"/api/contracts/{contract_id}/attachments")
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["fileName"] == "contract.pdf"
        assert body["mimeType"] == "application/pdf"
        assert body["contractId"] == contract_id
        assert STORAGE_PATH_RE.match(body["storagePath"])
        assert (Path(settings.UPLOADS_DIR) / body["storagePath"]).read_bytes() == PDF_BYTES

        listed = client.get(f"/api/contracts/{contract_id}/attachments").json()
        assert [a["id"] for a in listed] == [body["id"]]

        download = client.get(f"/api/attachments/{body['id']}/download")
        assert download.status_code == 200
        assert download.content == PDF_BYTES
        assert download.headers["content-type"].startswith("application/pdf")
        assert "contract.pdf" in download.headers["content-disposition"]

    def test_empty_file_is_400(self, client, contract_id):
        resp = _upload(client, f"/api/contracts/{contract_id}/attachments", content=b"")
        assert resp.status_code == 400

    def test_oversized_file_is_400(self, client, contract_id, monkeypatch):
        monkeypatch.setattr(attachment_service, "MAX_ATTACHMENT_BYTES", 8)
        resp = _upload(client, f"/api/contracts/{contract_id}/attachments", content=b"x" * 9)
        assert resp.status_code == 400
        assert "limit" in resp.json()["detail"]

    def test_missing_file_part_is_400(self, client, contract_id):
        resp = client.post(f"/api/contracts/{contract_id}/attachments", data={"x": "y"})
        assert resp.status_code == 400

    def test_unknown_contract_is_404(self, client, settings):
        resp = _upload(client, f"/api/contracts/{uuid.uuid4()}/attachments")
        assert resp.status_code == 404
        assert not Path(settings.UPLOADS_DIR).exists() or not any(
            p.is_file() for p in Path(settings.UPLOADS_DIR).rglob("*")
        )

    def test_delete_removes_file_keeps_contract(self, client, contract_id, settings):
        body = _upload(client, f"/api/contracts/{contract_id}/attachments").json()
        stored = Path(settings.UPLOADS_DIR) / body["storagePath"]

        assert client.delete(f"/api/attachments/{body['id']}").status_code == 204
        assert not stored.exists()
        assert client.get(f"/api/attachments/{body['id']}").status_code == 404
        assert client.get(f"/api/attachments/{body['id']}/download").status_code == 404
        assert client.get(f"/api/contracts/{contract_id}").status_code == 200

    def test_download_of_missing_file_is_404(self, client, contract_id, settings):
        body = _upload(client, f"/api/contracts/{contract_id}/attachments").json()
        (Path(settings.UPLOADS_DIR) / body["storagePath"]).unlink()
        assert client.get(f"/api/attachments/{body['id']}/download").status_code == 404


class TestEvidence:
    def _inspection(self, client, deliverable_id):
        resp = client.post(
            f"/api/deliverables/{deliverable_id}/inspections",
            json={"date": "2024-02-02", "inspector": "Ana"},
        )
        return resp.json()["id"]

    def test_deliverable_evidence(self, client, deliverable_id):
        resp = _upload(
            client,
            f"/api/deliverables/{deliverable_id}/evidences",
            name="photo.jpg",
            content=b"\xff\xd8jpeg",
            mime="image/jpeg",
            data={"notes": "Front door"},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["ownerKind"] == "deliverable"
        assert body["ownerId"] == deliverable_id
        assert body["deliverableId"] == deliverable_id
        assert body["inspectionId"] is None
        assert body["notes"] == "Front door"

        listed = client.get(f"/api/deliverables/{deliverable_id}/evidences").json()
        assert [e["id"] for e in listed] == [body["id"]]

    def test_inspection_evidence(self, client, deliverable_id):
        inspection_id = self._inspection(client, deliverable_id)
        body = _upload(client, f"/api/inspections/{inspection_id}/evidences").json()

        assert body["ownerKind"] == "inspection"
        assert body["ownerId"] == inspection_id
        assert body["deliverableId"] is None
        assert client.get(f"/api/deliverables/{deliverable_id}/evidences").json() == []
        assert len(client.get(f"/api/inspections/{inspection_id}/evidences").json()) == 1

    def test_unknown_owner_is_404(self, client):
        assert _upload(client, f"/api/inspections/{uuid.uuid4()}/evidences").status_code == 404
        assert client.get(f"/api/deliverables/{uuid.uuid4()}/evidences").status_code == 404

    def test_oversized_evidence_is_400(self, client, deliverable_id, monkeypatch):
        monkeypatch.setattr(evidence_service, "MAX_EVIDENCE_BYTES", 4)
        resp = _upload(client, f"/api/deliverables/{deliverable_id}/evidences", content=b"12345")
        assert resp.status_code == 400

    def test_evidence_survives_deliverable_deletion(self, client, deliverable_id):
        body = _upload(client, f"/api/deliverables/{deliverable_id}/evidences").json()
        client.delete(f"/api/deliverables/{deliverable_id}")
        assert client.get(f"/api/evidences/{body['id']}").status_code == 200

    def test_download_and_delete(self, client, deliverable_id, settings):
        body = _upload(client, f"/api/deliverables/{deliverable_id}/evidences").json()

        download = client.get(f"/api/evidences/{body['id']}/download")
        assert download.status_code == 200
        assert download.content == PDF_BYTES

        assert client.delete(f"/api/evidences/{body['id']}").status_code == 204
        assert not (Path(settings.UPLOADS_DIR) / body["storagePath"]).exists()
        assert client.get(f"/api/evidences/{body['id']}").status_code == 404
