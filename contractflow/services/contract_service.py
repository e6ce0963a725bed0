"""
Contracts — service layer.

All database access for the ``/api/contracts`` endpoints lives here.
Functions receive a SQLAlchemy ``Session`` and return ORM instances or
schema instances ready for serialisation by FastAPI.

Design notes
------------
- The list endpoint resolves supplier and org-unit names with explicit joins
  so that it issues a single query.
- The details view walks the aggregate through the ORM relationships and
  drops soft-deleted members with ``live()``; the nesting is shallow enough
  that the extra lazy loads are acceptable for a single contract.
- ``Period`` and ``Money`` invariants are re-checked when the entity is
  built; a violation becomes a 400.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from contractflow.models.contract import Contract
from contractflow.models.deliverable import Deliverable
from contractflow.models.obligation import Obligation
from contractflow.models.org_unit import OrgUnit
from contractflow.models.supplier import Supplier
from contractflow.models.value_objects import Money, Period
from contractflow.repository import Repository, commit, live, not_deleted
from contractflow.schemas.contract import (
    ContractCreate,
    ContractDetails,
    ContractListItem,
    ContractStats,
    ContractStatusUpdate,
    ObligationDetails,
)
from contractflow.schemas.deliverable import DeliverableResponse
from contractflow.schemas.non_compliance import NonComplianceResponse
from contractflow.utils.constants import ContractStatus
from contractflow.utils.dates import utcnow

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def list_contracts(db: Session) -> list[ContractListItem]:
    """Return every non-deleted contract, most recently created first."""
    rows = (
        db.query(
            Contract,
            Supplier.corporate_name.label("supplier_name"),
            OrgUnit.name.label("org_unit_name"),
        )
        .join(Supplier, Contract.supplier_id == Supplier.id)
        .join(OrgUnit, Contract.org_unit_id == OrgUnit.id)
        .filter(*not_deleted(Contract))
        .order_by(Contract.created_at.desc(), Contract.official_number)
        .all()
    )
    return [
        ContractListItem(
            id=contract.id,
            official_number=contract.official_number,
            type=contract.type,
            modality=contract.modality,
            status=contract.status,
            term_start=contract.term_start,
            term_end=contract.term_end,
            total_amount=float(contract.total_amount),
            currency=contract.currency,
            supplier_id=contract.supplier_id,
            supplier_name=supplier_name,
            org_unit_id=contract.org_unit_id,
            org_unit_name=org_unit_name,
        )
        for contract, supplier_name, org_unit_name in rows
    ]


def get_contract(db: Session, contract_id: uuid.UUID) -> Contract:
    return Repository(db, Contract).get_or_404(contract_id)


def get_contract_details(db: Session, contract_id: uuid.UUID) -> ContractDetails:
    """Build the nested details view of one contract.

    Args:
        db: Active SQLAlchemy session.
        contract_id: Contract primary key.

    Returns:
        Contract header with supplier and org-unit data, plus its non-deleted
        obligations, each with its deliverables and non-compliances.

    Raises:
        HTTPException 404: If the contract does not exist or is deleted.
    """
    contract = get_contract(db, contract_id)
    supplier = contract.supplier
    org_unit = contract.org_unit

    obligations = [
        ObligationDetails(
            id=obligation.id,
            clause_ref=obligation.clause_ref,
            description=obligation.description,
            due_date=obligation.due_date,
            status=obligation.status,
            deliverables=[
                DeliverableResponse.model_validate(d) for d in live(obligation.deliverables)
            ],
            non_compliances=[
                NonComplianceResponse.model_validate(nc)
                for nc in live(obligation.non_compliances)
            ],
        )
        for obligation in live(contract.obligations)
    ]

    return ContractDetails(
        id=contract.id,
        official_number=contract.official_number,
        administrative_process=contract.administrative_process,
        type=contract.type,
        modality=contract.modality,
        status=contract.status,
        term_start=contract.term_start,
        term_end=contract.term_end,
        total_amount=float(contract.total_amount),
        currency=contract.currency,
        supplier_id=supplier.id,
        supplier_name=supplier.corporate_name,
        supplier_cnpj=supplier.tax_id,
        org_unit_id=org_unit.id,
        org_unit_name=org_unit.name,
        org_unit_code=org_unit.code,
        obligations=obligations,
    )


def get_stats(
    db: Session, now: datetime | None = None, lookahead_days: int = 7
) -> ContractStats:
    """Return the dashboard header counters.

    Args:
        db: Active SQLAlchemy session.
        now: Evaluation time (defaults to the current UTC time).
        lookahead_days: Size of the "pending action" window.

    Returns:
        Active contracts, deliverables due within the window and overdue
        deliverables.
    """
    now = now or utcnow()
    soon = now + timedelta(days=lookahead_days)

    active = (
        Repository(db, Contract)
        .query()
        .filter(Contract.status == ContractStatus.ACTIVE)
        .count()
    )

    undelivered = (
        db.query(func.count(Deliverable.id))
        .join(Obligation, Deliverable.obligation_id == Obligation.id)
        .join(Contract, Obligation.contract_id == Contract.id)
        .filter(
            *not_deleted(Deliverable, Obligation, Contract),
            Deliverable.delivered_at.is_(None),
        )
    )
    overdue = undelivered.filter(Deliverable.expected_date < now).scalar() or 0
    pending_action = (
        undelivered.filter(
            Deliverable.expected_date >= now,
            Deliverable.expected_date <= soon,
        ).scalar()
        or 0
    )

    return ContractStats(
        active_contracts=active, pending_action=pending_action, overdue=overdue
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_contract(db: Session, data: ContractCreate) -> Contract:
    """Create a contract in status ``Active``.

    Args:
        db: Active SQLAlchemy session.
        data: Validated creation payload.

    Returns:
        The newly created ``Contract``.

    Raises:
        HTTPException 404: If the supplier or org unit does not exist.
        HTTPException 409: If the official number is already used.
        HTTPException 400: If the term or value is invalid.
    """
    Repository(db, Supplier).get_or_404(data.supplier_id)
    Repository(db, OrgUnit).get_or_404(data.org_unit_id)

    repo = Repository(db, Contract)
    official_number = data.official_number.strip()
    conflict_detail = f"A contract with official number '{official_number}' already exists."
    if repo.exists(Contract.official_number == official_number, exclude_deleted=False):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict_detail)

    try:
        term = Period(data.term_start, data.term_end)
        value = Money(data.total_amount, data.currency)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc

    contract = Contract(
        official_number=official_number,
        administrative_process=data.administrative_process,
        supplier_id=data.supplier_id,
        org_unit_id=data.org_unit_id,
        type=data.type,
        modality=data.modality,
        status=ContractStatus.ACTIVE,
    )
    contract.term = term
    contract.total_value = value

    repo.add(contract)
    commit(db, conflict_detail)
    db.refresh(contract)

    logger.info(
        "create_contract: id=%s number=%s value=%s",
        contract.id, contract.official_number, value,
    )
    return contract


def update_contract_status(
    db: Session, contract_id: uuid.UUID, data: ContractStatusUpdate
) -> Contract:
    contract = get_contract(db, contract_id)
    previous = contract.status
    contract.status = data.status
    contract.touch()
    commit(db)

    logger.info(
        "update_contract_status: id=%s %s -> %s",
        contract_id, previous.value, data.status.value,
    )
    return contract


def delete_contract(db: Session, contract_id: uuid.UUID) -> None:
    """Soft-delete a contract together with its obligations and their children."""
    repo = Repository(db, Contract)
    flagged = repo.soft_delete(repo.get_or_404(contract_id))
    commit(db)
    logger.info("delete_contract: id=%s (%d rows flagged)", contract_id, len(flagged))
