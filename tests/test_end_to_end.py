"""A full contract lifecycle driven through the HTTP API.

Acme supplies Dept A under contract 2024/001; one obligation has a single
deliverable due on 2024-02-01.  The deliverable goes from overdue to
delivered on time, a non-compliance is registered with a fine, and the
reports reflect every step.
"""


def test_contract_lifecycle(client, supplier_id, org_unit_id, contract_id, obligation_id, deliverable_id):
    # Overdue before delivery
    due = client.get("/api/reports/due-deliverables", params={"to": "2024-02-01"}).json()
    assert [(r["deliverableId"], r["status"]) for r in due] == [(deliverable_id, "overdue")]
    assert due[0]["contractNumber"] == "2024/001"

    # Delivered ahead of the expected date
    resp = client.put(
        f"/api/deliverables/{deliverable_id}/delivered", json={"deliveredAt": "2024-01-30"}
    )
    assert resp.status_code == 204
    assert client.get("/api/reports/due-deliverables").json() == []

    [by_supplier] = client.get("/api/reports/deliveries-by-supplier").json()
    assert by_supplier["supplierId"] == supplier_id
    assert by_supplier["supplierName"] == "Acme"
    assert by_supplier["totalDeliveries"] == 1
    assert by_supplier["onTimeDeliveries"] == 1
    assert by_supplier["lateDeliveries"] == 0

    [by_org_unit] = client.get("/api/reports/deliveries-by-orgunit").json()
    assert by_org_unit["orgUnitId"] == org_unit_id
    assert by_org_unit["onTimeDeliveries"] == 1

    [status_row] = client.get("/api/reports/contract-status").json()
    assert status_row["totalObligations"] == 1
    assert status_row["completedObligations"] == 1

    # Non-compliance with a fine
    nc = client.post(
        f"/api/obligations/{obligation_id}/noncompliances",
        json={"reason": "Report missing signature", "severity": "Alta"},
    )
    assert nc.status_code == 201
    nc_id = nc.json()["id"]

    penalty = client.post(
        f"/api/noncompliances/{nc_id}/penalties",
        json={"type": "Fine", "legalBasis": "Clause 12", "amount": 500},
    )
    assert penalty.status_code == 201

    [row] = client.get("/api/reports/penalties").json()
    assert row["penaltyId"] == penalty.json()["id"]
    assert row["contractId"] == contract_id
    assert row["amount"] == 500.0
    assert row["severityLevel"] == "high"

    # Only one penalty per non-compliance
    again = client.post(f"/api/noncompliances/{nc_id}/penalties", json={"type": "Fine", "amount": 1})
    assert again.status_code == 400
    assert len(client.get("/api/reports/penalties").json()) == 1

    # The workbook export follows the same data
    export = client.get("/api/reports/penalties/export")
    assert export.status_code == 200
    assert export.content[:2] == b"PK"
