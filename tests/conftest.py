"""Shared test fixtures for the ContractFlow test suite.

Every test gets a fresh in-memory SQLite database (one connection shared
through ``StaticPool`` so the API thread pool sees the same data) and a
temporary upload directory.  API tests use ``client``; service-level tests
use ``db_session`` together with the ``factory`` helpers.
"""

import os
from datetime import datetime
from decimal import Decimal

# Settings are read at import time by contractflow.main; keep the default
# engine in memory and the scan job off for the whole session.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALERT_SCAN_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import contractflow.models  # noqa: E402,F401
from contractflow.config import Settings, get_settings  # noqa: E402
from contractflow.database import Base, build_engine, get_db  # noqa: E402
from contractflow.main import app  # noqa: E402
from contractflow.models import (  # noqa: E402
    Contract,
    Deliverable,
    NonCompliance,
    Obligation,
    OrgUnit,
    Penalty,
    Supplier,
)
from contractflow.utils.constants import (  # noqa: E402
    ContractModality,
    ContractStatus,
    ContractType,
)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        UPLOADS_DIR=tmp_path / "uploads",
        ALERT_SCAN_ENABLED=False,
    )


@pytest.fixture
def client(session_factory, settings):
    """TestClient with ``get_db`` and ``get_settings`` pointed at the test fixtures."""

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# API seed data (the Acme / Dept A scenario)
# ---------------------------------------------------------------------------


@pytest.fixture
def supplier_id(client):
    resp = client.post(
        "/api/suppliers",
        json={"corporateName": "Acme", "cnpj": "12.345.678/0001-90", "active": True},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def org_unit_id(client):
    resp = client.post("/api/orgunits", json={"name": "Dept A", "code": "D1"})
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def contract_payload(supplier_id, org_unit_id):
    return {
        "officialNumber": "2024/001",
        "supplierId": supplier_id,
        "orgUnitId": org_unit_id,
        "type": "Servico",
        "modality": "Pregao",
        "termStart": "2024-01-01",
        "termEnd": "2024-12-31",
        "totalAmount": 1000,
        "currency": "BRL",
    }


@pytest.fixture
def contract_id(client, contract_payload):
    resp = client.post("/api/contracts", json=contract_payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def obligation_id(client, contract_id):
    resp = client.post(
        f"/api/contracts/{contract_id}/obligations",
        json={"clauseRef": "Clause 1", "description": "Monthly cleaning report"},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def deliverable_id(client, obligation_id):
    resp = client.post(
        f"/api/obligations/{obligation_id}/deliverables",
        json={"expectedDate": "2024-02-01", "quantity": 10, "unit": "un"},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# ORM factory for service-level tests
# ---------------------------------------------------------------------------


class Factory:
    """Creates committed rows with sensible defaults."""

    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _save(self, entity):
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def supplier(self, corporate_name="Acme", tax_id=None):
        return self._save(
            Supplier(corporate_name=corporate_name, tax_id=tax_id or f"TAX-{self._next()}")
        )

    def org_unit(self, name="Dept A", code=None):
        return self._save(OrgUnit(name=name, code=code))

    def contract(
        self,
        supplier=None,
        org_unit=None,
        official_number=None,
        term_start=datetime(2024, 1, 1),
        term_end=datetime(2024, 12, 31),
        status=ContractStatus.ACTIVE,
    ):
        supplier = supplier or self.supplier()
        org_unit = org_unit or self.org_unit()
        return self._save(
            Contract(
                official_number=official_number or f"2024/{self._next():03d}",
                supplier_id=supplier.id,
                org_unit_id=org_unit.id,
                type=ContractType.SERVICE,
                modality=ContractModality.PREGAO,
                status=status,
                term_start=term_start,
                term_end=term_end,
                total_amount=Decimal("1000.00"),
                currency="BRL",
            )
        )

    def obligation(self, contract=None, clause_ref="Clause 1", status="Pending"):
        contract = contract or self.contract()
        return self._save(
            Obligation(
                contract_id=contract.id,
                clause_ref=clause_ref,
                description="Monthly cleaning report",
                status=status,
            )
        )

    def deliverable(self, obligation=None, expected_date=datetime(2024, 2, 1), delivered_at=None):
        obligation = obligation or self.obligation()
        return self._save(
            Deliverable(
                obligation_id=obligation.id,
                expected_date=expected_date,
                quantity=Decimal("10"),
                unit="un",
                delivered_at=delivered_at,
            )
        )

    def non_compliance(self, obligation=None, severity="Alta", registered_at=datetime(2024, 3, 1)):
        obligation = obligation or self.obligation()
        return self._save(
            NonCompliance(
                obligation_id=obligation.id,
                reason="Late report",
                severity=severity,
                registered_at=registered_at,
            )
        )

    def penalty(self, non_compliance, type="Fine", amount=Decimal("500.00")):
        return self._save(
            Penalty(non_compliance_id=non_compliance.id, type=type, amount=amount)
        )


@pytest.fixture
def factory(db_session):
    return Factory(db_session)
