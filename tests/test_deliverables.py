"""Obligations, deliverables, inspections, non-compliances and penalties over the API."""

import uuid


class TestObligations:
    def test_default_status_and_listing(self, client, contract_id, obligation_id):
        rows = client.get(f"/api/contracts/{contract_id}/obligations").json()
        assert [o["id"] for o in rows] == [obligation_id]
        assert rows[0]["status"] == "Pending"
        assert rows[0]["contractId"] == contract_id

    def test_unknown_contract_is_404(self, client):
        resp = client.post(
            f"/api/contracts/{uuid.uuid4()}/obligations",
            json={"clauseRef": "Clause 1", "description": "x"},
        )
        assert resp.status_code == 404

    def test_update(self, client, obligation_id):
        resp = client.put(
            f"/api/obligations/{obligation_id}",
            json={
                "clauseRef": "Clause 1.1",
                "description": "Quarterly report",
                "dueDate": "2024-06-30",
                "status": "Completed",
            },
        )
        assert resp.status_code == 204
        body = client.get(f"/api/obligations/{obligation_id}").json()
        assert body["clauseRef"] == "Clause 1.1"
        assert body["dueDate"] == "2024-06-30T00:00:00"
        assert body["status"] == "Completed"

    def test_delete_cascades_to_deliverables(self, client, obligation_id, deliverable_id):
        assert client.delete(f"/api/obligations/{obligation_id}").status_code == 204
        assert client.get(f"/api/obligations/{obligation_id}").status_code == 404
        assert client.get(f"/api/deliverables/{deliverable_id}").status_code == 404


class TestDeliverables:
    def test_listing_per_obligation_and_contract(self, client, contract_id, obligation_id, deliverable_id):
        client.post(
            f"/api/obligations/{obligation_id}/deliverables",
            json={"expectedDate": "2024-01-15", "quantity": 1, "unit": "un"},
        )
        per_obligation = client.get(f"/api/obligations/{obligation_id}/deliverables").json()
        per_contract = client.get(f"/api/contracts/{contract_id}/deliverables").json()

        assert [d["expectedDate"] for d in per_obligation] == [
            "2024-01-15T00:00:00",
            "2024-02-01T00:00:00",
        ]
        assert [d["id"] for d in per_contract] == [d["id"] for d in per_obligation]

    def test_negative_quantity_is_400(self, client, obligation_id):
        resp = client.post(
            f"/api/obligations/{obligation_id}/deliverables",
            json={"expectedDate": "2024-02-01", "quantity": -1, "unit": "un"},
        )
        assert resp.status_code == 400

    def test_mark_delivered_overwrites(self, client, deliverable_id):
        url = f"/api/deliverables/{deliverable_id}/delivered"
        assert client.put(url, json={"deliveredAt": "2024-01-30"}).status_code == 204
        assert client.put(url, json={"deliveredAt": "2024-01-31T10:00:00Z"}).status_code == 204

        body = client.get(f"/api/deliverables/{deliverable_id}").json()
        assert body["deliveredAt"] == "2024-01-31T10:00:00"
        assert body["quantity"] == 10.0

    def test_mark_unknown_deliverable_is_404(self, client):
        resp = client.put(
            f"/api/deliverables/{uuid.uuid4()}/delivered", json={"deliveredAt": "2024-01-30"}
        )
        assert resp.status_code == 404


class TestInspections:
    def _create(self, client, deliverable_id, date, inspector="Ana"):
        resp = client.post(
            f"/api/deliverables/{deliverable_id}/inspections",
            json={"date": date, "inspector": inspector, "notes": "ok"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["id"]

    def test_listed_most_recent_first(self, client, deliverable_id):
        older = self._create(client, deliverable_id, "2024-02-02")
        newer = self._create(client, deliverable_id, "2024-02-10")

        rows = client.get(f"/api/deliverables/{deliverable_id}/inspections").json()
        assert [r["id"] for r in rows] == [newer, older]

    def test_update_and_delete(self, client, deliverable_id):
        inspection_id = self._create(client, deliverable_id, "2024-02-02")
        resp = client.put(
            f"/api/inspections/{inspection_id}",
            json={"date": "2024-02-03", "inspector": "Bruno"},
        )
        assert resp.status_code == 204
        body = client.get(f"/api/inspections/{inspection_id}").json()
        assert body["inspector"] == "Bruno"
        assert body["notes"] is None

        assert client.delete(f"/api/inspections/{inspection_id}").status_code == 204
        assert client.get(f"/api/inspections/{inspection_id}").status_code == 404

    def test_deleting_deliverable_deletes_inspections(self, client, deliverable_id):
        inspection_id = self._create(client, deliverable_id, "2024-02-02")
        assert client.delete(f"/api/deliverables/{deliverable_id}").status_code == 204
        assert client.get(f"/api/inspections/{inspection_id}").status_code == 404


class TestNonCompliances:
    def _register(self, client, obligation_id, severity="Alta"):
        resp = client.post(
            f"/api/obligations/{obligation_id}/noncompliances",
            json={"reason": "Late report", "severity": severity, "registeredAt": "2024-03-01"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["id"]

    def test_register_and_classify(self, client, obligation_id):
        nc_id = self._register(client, obligation_id)
        body = client.get(f"/api/noncompliances/{nc_id}").json()
        assert body["severity"] == "Alta"
        assert body["severityLevel"] == "high"
        assert body["registeredAt"] == "2024-03-01T00:00:00"
        assert body["penalty"] is None

    def test_registered_at_defaults_to_now(self, client, obligation_id):
        resp = client.post(
            f"/api/obligations/{obligation_id}/noncompliances",
            json={"reason": "Missing staff", "severity": "Whatever"},
        )
        body = client.get(f"/api/noncompliances/{resp.json()['id']}").json()
        assert body["registeredAt"]
        assert body["severityLevel"] is None

    def test_listed_most_recent_first(self, client, obligation_id):
        first = self._register(client, obligation_id)
        resp = client.post(
            f"/api/obligations/{obligation_id}/noncompliances",
            json={"reason": "Again", "severity": "Baixa", "registeredAt": "2024-04-01"},
        )
        rows = client.get(f"/api/obligations/{obligation_id}/noncompliances").json()
        assert [r["id"] for r in rows] == [resp.json()["id"], first]

    def test_update(self, client, obligation_id):
        nc_id = self._register(client, obligation_id)
        resp = client.put(
            f"/api/noncompliances/{nc_id}", json={"reason": "Very late", "severity": "Crítica"}
        )
        assert resp.status_code == 204
        assert client.get(f"/api/noncompliances/{nc_id}").json()["severityLevel"] == "critical"

    def test_single_penalty(self, client, obligation_id):
        nc_id = self._register(client, obligation_id)
        first = client.post(
            f"/api/noncompliances/{nc_id}/penalties",
            json={"type": "Fine", "legalBasis": "Art. 156", "amount": 500},
        )
        assert first.status_code == 201

        second = client.post(
            f"/api/noncompliances/{nc_id}/penalties", json={"type": "Warning"}
        )
        assert second.status_code == 400

        penalty = client.get(f"/api/noncompliances/{nc_id}").json()["penalty"]
        assert penalty["id"] == first.json()["id"]
        assert penalty["type"] == "Fine"
        assert penalty["amount"] == 500.0

    def test_penalty_for_unknown_non_compliance_is_404(self, client):
        resp = client.post(f"/api/noncompliances/{uuid.uuid4()}/penalties", json={"type": "Fine"})
        assert resp.status_code == 404

    def test_delete_removes_from_listing(self, client, obligation_id):
        nc_id = self._register(client, obligation_id)
        client.post(f"/api/noncompliances/{nc_id}/penalties", json={"type": "Fine", "amount": 1})

        assert client.delete(f"/api/noncompliances/{nc_id}").status_code == 204
        assert client.get(f"/api/obligations/{obligation_id}/noncompliances").json() == []
        assert client.get("/api/reports/penalties").json() == []
