"""
Pydantic v2 schemas for the Contracts module.

These models define the JSON shapes consumed and returned by the endpoints
in ``contractflow/routers/contracts.py``.  The details view nests
obligations, their deliverables and non-compliances (each with its optional
penalty); soft-deleted children are filtered out by the service before the
schema is built.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field, model_validator

from contractflow.schemas.common import ApiModel, UtcDateTime
from contractflow.schemas.deliverable import DeliverableResponse
from contractflow.schemas.non_compliance import NonComplianceResponse
from contractflow.utils.constants import (
    DEFAULT_CURRENCY,
    ContractModality,
    ContractStatus,
    ContractType,
)


# ---------------------------------------------------------------------------
# Input schemas — write operations
# ---------------------------------------------------------------------------


class ContractCreate(ApiModel):
    """Payload for creating a new contract (``POST /api/contracts``).

    The contract starts in status ``Active``.  ``termEnd`` must be strictly
    after ``termStart``; the check runs here so a bad term is rejected with
    400 before any lookup.

    Attributes:
        official_number: Unique official number, e.g. ``"2024/001"``.
        supplier_id: Primary key of the contracted Supplier.
        org_unit_id: Primary key of the responsible OrgUnit.
        type: Contract type.
        modality: Procurement modality.
        term_start: Start of the contract term.
        term_end: End of the contract term.
        total_amount: Contract value (non-negative).
        currency: ISO currency code, ``BRL`` when omitted or blank.
        administrative_process: Optional administrative process number.
    """

    official_number: str = Field(..., min_length=1, max_length=100)
    supplier_id: uuid.UUID
    org_unit_id: uuid.UUID
    type: ContractType
    modality: ContractModality
    term_start: UtcDateTime
    term_end: UtcDateTime
    total_amount: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    currency: str = Field(default=DEFAULT_CURRENCY, max_length=3)
    administrative_process: str | None = Field(default=None, max_length=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "officialNumber": "2024/001",
                "supplierId": "6f1c0a52-6a43-4c55-9a4f-2f3c4d9e8b10",
                "orgUnitId": "0b8f2d4e-3c1a-4b7e-8f6d-5a9c2e1d3f40",
                "type": "Servico",
                "modality": "Pregao",
                "termStart": "2024-01-01",
                "termEnd": "2024-12-31",
                "totalAmount": 1000.00,
                "currency": "BRL",
                "administrativeProcess": None,
            }
        }
    )

    @model_validator(mode="after")
    def _check_term(self) -> "ContractCreate":
        if self.term_end <= self.term_start:
            raise ValueError("End must be after Start.")
        return self


class ContractStatusUpdate(ApiModel):
    """Payload for ``PUT /api/contracts/{id}/status``."""

    status: ContractStatus


# ---------------------------------------------------------------------------
# Output schemas
# ---------------------------------------------------------------------------


class ContractListItem(ApiModel):
    """Row of the contracts list, with supplier and org-unit names resolved."""

    id: uuid.UUID
    official_number: str
    type: ContractType
    modality: ContractModality
    status: ContractStatus
    term_start: datetime
    term_end: datetime
    total_amount: float
    currency: str
    supplier_id: uuid.UUID
    supplier_name: str
    org_unit_id: uuid.UUID
    org_unit_name: str


class ObligationDetails(ApiModel):
    id: uuid.UUID
    clause_ref: str
    description: str
    due_date: datetime | None = None
    status: str
    deliverables: list[DeliverableResponse] = Field(default_factory=list)
    non_compliances: list[NonComplianceResponse] = Field(default_factory=list)


class ContractDetails(ApiModel):
    """Full contract view returned by ``GET /api/contracts/{id}``.

    Attributes:
        supplier_cnpj: Tax id of the contracted supplier.
        obligations: Non-deleted obligations ordered by clause reference.
    """

    id: uuid.UUID
    official_number: str
    administrative_process: str | None = None
    type: ContractType
    modality: ContractModality
    status: ContractStatus
    term_start: datetime
    term_end: datetime
    total_amount: float
    currency: str
    supplier_id: uuid.UUID
    supplier_name: str
    supplier_cnpj: str
    org_unit_id: uuid.UUID
    org_unit_name: str
    org_unit_code: str | None = None
    obligations: list[ObligationDetails] = Field(default_factory=list)


class ContractStats(ApiModel):
    """Dashboard header counters (``GET /api/contracts/stats``).

    Attributes:
        active_contracts: Contracts currently in status ``Active``.
        pending_action: Undelivered deliverables due within the look-ahead
                        window that are not yet overdue.
        overdue: Undelivered deliverables whose expected date has passed.
    """

    active_contracts: int = Field(..., ge=0)
    pending_action: int = Field(..., ge=0)
    overdue: int = Field(..., ge=0)
