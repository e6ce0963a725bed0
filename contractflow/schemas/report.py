"""
Pydantic v2 schemas for the read-only Reports module.

Every report row is a flat projection produced by ``report_service``; none
of them is mutated after construction.  Amounts are floats on the wire.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from contractflow.schemas.common import ApiModel
from contractflow.utils.constants import ContractStatus


class DueDeliverableRow(ApiModel):
    """Undelivered deliverable with its computed due status.

    Attributes:
        status: ``"overdue"`` when the expected date is before the evaluation
                time, ``"pending"`` otherwise.
    """

    deliverable_id: uuid.UUID
    obligation_id: uuid.UUID
    contract_id: uuid.UUID
    contract_number: str
    obligation_description: str
    expected_date: datetime
    quantity: float
    unit: str
    status: str


class ContractStatusRow(ApiModel):
    """Obligation progress of one contract.

    Attributes:
        total_obligations: Non-deleted obligations of the contract.
        completed_obligations: Obligations marked ``Completed`` or whose
            deliverables (at least one) are all delivered.
    """

    contract_id: uuid.UUID
    official_number: str
    status: ContractStatus
    total_obligations: int = Field(..., ge=0)
    completed_obligations: int = Field(..., ge=0)


class ContractStatusSummaryRow(ApiModel):
    status: ContractStatus
    count: int = Field(..., ge=0)


class DeliveryBySupplierRow(ApiModel):
    """Delivery punctuality of one supplier.

    ``totalDeliveries`` minus the on-time and late counts gives the
    deliverables that are still pending and not yet due.
    """

    supplier_id: uuid.UUID
    supplier_name: str
    total_deliveries: int = Field(..., ge=0)
    on_time_deliveries: int = Field(..., ge=0)
    late_deliveries: int = Field(..., ge=0)


class DeliveryByOrgUnitRow(ApiModel):
    org_unit_id: uuid.UUID
    org_unit_name: str
    total_deliveries: int = Field(..., ge=0)
    on_time_deliveries: int = Field(..., ge=0)
    late_deliveries: int = Field(..., ge=0)


class PenaltyReportRow(ApiModel):
    penalty_id: uuid.UUID
    non_compliance_id: uuid.UUID
    contract_id: uuid.UUID
    obligation_id: uuid.UUID
    reason: str
    severity: str
    severity_level: str | None = None
    registered_at: datetime
    type: str
    legal_basis: str | None = None
    amount: float | None = None
