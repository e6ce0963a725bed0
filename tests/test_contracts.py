"""Contracts: creation rules, listing, details, status, stats and deletion."""

import uuid
from datetime import datetime

from contractflow.services import contract_service
from contractflow.utils.constants import ContractStatus


class TestCreateContract:
    def test_created_active_with_default_currency(self, client, contract_payload):
        contract_payload.pop("currency")
        resp = client.post("/api/contracts", json=contract_payload)
        assert resp.status_code == 201
        contract_id = resp.json()["id"]

        body = client.get(f"/api/contracts/{contract_id}").json()
        assert body["status"] == "Active"
        assert body["currency"] == "BRL"
        assert body["totalAmount"] == 1000.0
        assert body["termStart"] == "2024-01-01T00:00:00"
        assert body["supplierCnpj"] == "12.345.678/0001-90"
        assert body["orgUnitCode"] == "D1"
        assert body["obligations"] == []

    def test_end_before_start_is_400(self, client, contract_payload):
        contract_payload["termEnd"] = "2023-12-31"
        resp = client.post("/api/contracts", json=contract_payload)
        assert resp.status_code == 400
        assert "End must be after Start." in resp.text

    def test_same_day_term_is_400(self, client, contract_payload):
        contract_payload["termEnd"] = contract_payload["termStart"]
        assert client.post("/api/contracts", json=contract_payload).status_code == 400

    def test_negative_amount_is_400(self, client, contract_payload):
        contract_payload["totalAmount"] = -1
        assert client.post("/api/contracts", json=contract_payload).status_code == 400

    def test_unknown_enum_value_is_400(self, client, contract_payload):
        contract_payload["modality"] = "Auction"
        assert client.post("/api/contracts", json=contract_payload).status_code == 400

    def test_unknown_supplier_is_404(self, client, contract_payload):
        contract_payload["supplierId"] = str(uuid.uuid4())
        assert client.post("/api/contracts", json=contract_payload).status_code == 404

    def test_duplicate_official_number_is_409(self, client, contract_payload, contract_id):
        assert client.post("/api/contracts", json=contract_payload).status_code == 409


class TestReadContracts:
    def test_list_resolves_names(self, client, contract_id):
        rows = client.get("/api/contracts").json()
        assert len(rows) == 1
        assert rows[0]["id"] == contract_id
        assert rows[0]["supplierName"] == "Acme"
        assert rows[0]["orgUnitName"] == "Dept A"
        assert rows[0]["officialNumber"] == "2024/001"

    def test_details_nest_children(self, client, contract_id, obligation_id, deliverable_id):
        nc = client.post(
            f"/api/obligations/{obligation_id}/noncompliances",
            json={"reason": "Late report", "severity": "Alta"},
        ).json()
        client.post(f"/api/noncompliances/{nc['id']}/penalties", json={"type": "Warning"})

        body = client.get(f"/api/contracts/{contract_id}").json()
        [obligation] = body["obligations"]
        assert obligation["id"] == obligation_id
        assert obligation["status"] == "Pending"
        assert [d["id"] for d in obligation["deliverables"]] == [deliverable_id]
        [non_compliance] = obligation["nonCompliances"]
        assert non_compliance["severityLevel"] == "high"
        assert non_compliance["penalty"]["type"] == "Warning"

    def test_unknown_contract_is_404(self, client):
        assert client.get(f"/api/contracts/{uuid.uuid4()}").status_code == 404


class TestContractStatus:
    def test_change_status(self, client, contract_id):
        resp = client.put(f"/api/contracts/{contract_id}/status", json={"status": "Suspended"})
        assert resp.status_code == 204
        assert resp.content == b""
        assert client.get(f"/api/contracts/{contract_id}").json()["status"] == "Suspended"

    def test_unknown_status_is_400(self, client, contract_id):
        resp = client.put(f"/api/contracts/{contract_id}/status", json={"status": "Paused"})
        assert resp.status_code == 400


class TestDeleteContract:
    def test_delete_hides_contract_and_children(self, client, contract_id, obligation_id, deliverable_id):
        assert client.delete(f"/api/contracts/{contract_id}").status_code == 204

        assert client.get(f"/api/contracts/{contract_id}").status_code == 404
        assert client.get("/api/contracts").json() == []
        assert client.get(f"/api/obligations/{obligation_id}").status_code == 404
        assert client.get(f"/api/deliverables/{deliverable_id}").status_code == 404

    def test_deleted_number_cannot_be_reused(self, client, contract_payload, contract_id):
        client.delete(f"/api/contracts/{contract_id}")
        assert client.post("/api/contracts", json=contract_payload).status_code == 409


class TestStats:
    def test_api_counts_overdue(self, client, contract_id, deliverable_id):
        body = client.get("/api/contracts/stats").json()
        assert body == {"activeContracts": 1, "pendingAction": 0, "overdue": 1}

    def test_window_with_pinned_now(self, factory, db_session):
        obligation = factory.obligation()
        factory.deliverable(obligation, expected_date=datetime(2024, 1, 20))  # overdue
        factory.deliverable(obligation, expected_date=datetime(2024, 2, 5))  # within 7 days
        factory.deliverable(obligation, expected_date=datetime(2024, 3, 1))  # outside window
        factory.deliverable(
            obligation, expected_date=datetime(2024, 1, 10), delivered_at=datetime(2024, 1, 9)
        )
        factory.contract(status=ContractStatus.CLOSED)

        stats = contract_service.get_stats(db_session, now=datetime(2024, 2, 1))
        assert stats.active_contracts == 1
        assert stats.pending_action == 1
        assert stats.overdue == 1
