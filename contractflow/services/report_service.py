"""
Reports — read-only aggregation service.

All data for the ``/api/reports`` endpoints is produced here.  Every
function receives a SQLAlchemy ``Session`` plus an optional inclusive
``[date_from, date_to]`` range and returns a list of report rows.

Design notes
------------
- Date ranges are whole days: ``date_to`` includes everything up to the end
  of that day (see ``day_bounds``).  A range whose start is after its end is
  rejected with 400 rather than silently producing an empty report.
- Every query filters soft-deleted rows on *all* joined models, so a row
  whose owning obligation or contract is deleted never appears.
- The classification rules (``due_status``, ``classify_delivery``,
  ``is_obligation_completed``) are plain functions of their inputs and the
  evaluation time ``now``, which callers may pin for reproducible output.
- Grouping is done in Python after a single joined query; the volumes are
  those of a departmental contract registry.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from typing import Any, Iterable

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from contractflow.models.contract import Contract
from contractflow.models.deliverable import Deliverable
from contractflow.models.non_compliance import NonCompliance
from contractflow.models.obligation import Obligation
from contractflow.models.org_unit import OrgUnit
from contractflow.models.penalty import Penalty
from contractflow.models.supplier import Supplier
from contractflow.repository import live, not_deleted
from contractflow.schemas.report import (
    ContractStatusRow,
    ContractStatusSummaryRow,
    DeliveryByOrgUnitRow,
    DeliveryBySupplierRow,
    DueDeliverableRow,
    PenaltyReportRow,
)
from contractflow.utils.constants import (
    DUE_STATUS_OVERDUE,
    DUE_STATUS_PENDING,
    OBLIGATION_COMPLETED_STATUS,
    ContractStatus,
    severity_level,
)
from contractflow.utils.dates import day_bounds, utcnow

logger = logging.getLogger(__name__)

DELIVERY_ON_TIME = "on_time"
DELIVERY_LATE = "late"
DELIVERY_PENDING = "pending"


# ---------------------------------------------------------------------------
# Classification rules
# ---------------------------------------------------------------------------


def due_status(expected_date: datetime, now: datetime) -> str:
    """Return ``"overdue"`` if ``expected_date`` is strictly before ``now``, else ``"pending"``."""
    return DUE_STATUS_OVERDUE if expected_date < now else DUE_STATUS_PENDING


def classify_delivery(
    expected_date: datetime, delivered_at: datetime | None, now: datetime
) -> str:
    """Classify one deliverable for the punctuality reports.

    Args:
        expected_date: When the delivery was due.
        delivered_at: When it was delivered, or ``None``.
        now: Evaluation time.

    Returns:
        ``"on_time"`` when delivered no later than expected, ``"late"`` when
        delivered after the expected date or still undelivered past it, and
        ``"pending"`` when undelivered and not yet due.
    """
    if delivered_at is not None:
        return DELIVERY_ON_TIME if delivered_at <= expected_date else DELIVERY_LATE
    return DELIVERY_LATE if expected_date < now else DELIVERY_PENDING


def is_obligation_completed(obligation_status: str | None, deliverables: Iterable[Any]) -> bool:
    """Return whether an obligation counts as completed.

    An obligation is completed when its status reads ``Completed`` (any
    case), or when it has at least one deliverable and every one of them
    has been delivered.

    Args:
        obligation_status: Free-text status of the obligation.
        deliverables: The obligation's non-deleted deliverables.
    """
    if (obligation_status or "").strip().lower() == OBLIGATION_COMPLETED_STATUS:
        return True
    deliverables = list(deliverables)
    return bool(deliverables) and all(d.delivered_at is not None for d in deliverables)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def check_range(date_from: date | None, date_to: date | None) -> None:
    """Reject a range whose start is after its end.

    Raises:
        HTTPException 400: If ``date_from > date_to``.
    """
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'from' ({date_from}) must not be after 'to' ({date_to}).",
        )


def _apply_range(query: Any, column: Any, date_from: date | None, date_to: date | None) -> Any:
    check_range(date_from, date_to)
    start, end = day_bounds(date_from, date_to)
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column < end)
    return query


def _deliverable_query(db: Session, *entities: Any) -> Any:
    """Deliverables joined to their obligation and contract, deleted rows excluded."""
    return (
        db.query(Deliverable, *entities)
        .join(Obligation, Deliverable.obligation_id == Obligation.id)
        .join(Contract, Obligation.contract_id == Contract.id)
        .filter(*not_deleted(Deliverable, Obligation, Contract))
    )


def _punctuality(rows: Iterable[tuple[Any, ...]], now: datetime) -> dict[Any, dict[str, Any]]:
    """Group ``(deliverable, group_id, group_name)`` rows and count outcomes."""
    groups: dict[Any, dict[str, Any]] = {}
    for deliverable, group_id, group_name in rows:
        group = groups.setdefault(
            group_id, {"name": group_name, "counts": Counter(), "total": 0}
        )
        group["total"] += 1
        group["counts"][
            classify_delivery(deliverable.expected_date, deliverable.delivered_at, now)
        ] += 1
    return groups


# ---------------------------------------------------------------------------
# Public report functions
# ---------------------------------------------------------------------------


def get_due_deliverables(
    db: Session,
    date_from: date | None = None,
    date_to: date | None = None,
    now: datetime | None = None,
) -> list[DueDeliverableRow]:
    """Return undelivered deliverables, ascending by expected date.

    Args:
        db: Active SQLAlchemy session.
        date_from: Optional first expected date (inclusive).
        date_to: Optional last expected date (inclusive).
        now: Evaluation time for the overdue/pending status.

    Returns:
        One row per undelivered deliverable in range.
    """
    now = now or utcnow()
    query = _deliverable_query(
        db,
        Obligation.description.label("obligation_description"),
        Contract.id.label("contract_id"),
        Contract.official_number.label("contract_number"),
    ).filter(Deliverable.delivered_at.is_(None))
    query = _apply_range(query, Deliverable.expected_date, date_from, date_to)

    rows = query.order_by(Deliverable.expected_date, Deliverable.id).all()
    logger.debug("get_due_deliverables: %d rows", len(rows))
    return [
        DueDeliverableRow(
            deliverable_id=deliverable.id,
            obligation_id=deliverable.obligation_id,
            contract_id=contract_id,
            contract_number=contract_number,
            obligation_description=obligation_description,
            expected_date=deliverable.expected_date,
            quantity=float(deliverable.quantity),
            unit=deliverable.unit,
            status=due_status(deliverable.expected_date, now),
        )
        for deliverable, obligation_description, contract_id, contract_number in rows
    ]


def _contracts_in_range(db: Session, date_from: date | None, date_to: date | None) -> list[Contract]:
    """Non-deleted contracts whose term overlaps the optional range."""
    check_range(date_from, date_to)
    start, end = day_bounds(date_from, date_to)
    query = db.query(Contract).filter(*not_deleted(Contract))
    if start is not None:
        query = query.filter(Contract.term_end >= start)
    if end is not None:
        query = query.filter(Contract.term_start < end)
    return query.order_by(Contract.official_number).all()


def get_contract_status(
    db: Session, date_from: date | None = None, date_to: date | None = None
) -> list[ContractStatusRow]:
    """Return obligation progress per contract, sorted by official number."""
    result: list[ContractStatusRow] = []
    for contract in _contracts_in_range(db, date_from, date_to):
        obligations = live(contract.obligations)
        completed = sum(
            1
            for obligation in obligations
            if is_obligation_completed(obligation.status, live(obligation.deliverables))
        )
        result.append(
            ContractStatusRow(
                contract_id=contract.id,
                official_number=contract.official_number,
                status=contract.status,
                total_obligations=len(obligations),
                completed_obligations=completed,
            )
        )
    return result


def get_contract_status_summary(
    db: Session, date_from: date | None = None, date_to: date | None = None
) -> list[ContractStatusSummaryRow]:
    """Return the number of contracts per status, in the order statuses are declared."""
    counts = Counter(c.status for c in _contracts_in_range(db, date_from, date_to))
    return [
        ContractStatusSummaryRow(status=contract_status, count=counts[contract_status])
        for contract_status in ContractStatus
        if counts[contract_status]
    ]


def get_deliveries_by_supplier(
    db: Session,
    date_from: date | None = None,
    date_to: date | None = None,
    now: datetime | None = None,
) -> list[DeliveryBySupplierRow]:
    """Group deliverables by the supplier of their contract and count punctuality.

    Args:
        db: Active SQLAlchemy session.
        date_from: Optional first expected date (inclusive).
        date_to: Optional last expected date (inclusive).
        now: Evaluation time for undelivered deliverables.

    Returns:
        One row per supplier with at least one deliverable, sorted by name.
    """
    now = now or utcnow()
    query = _deliverable_query(db, Supplier.id, Supplier.corporate_name).join(
        Supplier, Contract.supplier_id == Supplier.id
    )
    query = _apply_range(query, Deliverable.expected_date, date_from, date_to)

    groups = _punctuality(query.all(), now)
    rows = [
        DeliveryBySupplierRow(
            supplier_id=supplier_id,
            supplier_name=group["name"],
            total_deliveries=group["total"],
            on_time_deliveries=group["counts"][DELIVERY_ON_TIME],
            late_deliveries=group["counts"][DELIVERY_LATE],
        )
        for supplier_id, group in groups.items()
    ]
    return sorted(rows, key=lambda r: (r.supplier_name.lower(), str(r.supplier_id)))


def get_deliveries_by_org_unit(
    db: Session,
    date_from: date | None = None,
    date_to: date | None = None,
    now: datetime | None = None,
) -> list[DeliveryByOrgUnitRow]:
    """Group deliverables by the org unit of their contract and count punctuality."""
    now = now or utcnow()
    query = _deliverable_query(db, OrgUnit.id, OrgUnit.name).join(
        OrgUnit, Contract.org_unit_id == OrgUnit.id
    )
    query = _apply_range(query, Deliverable.expected_date, date_from, date_to)

    groups = _punctuality(query.all(), now)
    rows = [
        DeliveryByOrgUnitRow(
            org_unit_id=org_unit_id,
            org_unit_name=group["name"],
            total_deliveries=group["total"],
            on_time_deliveries=group["counts"][DELIVERY_ON_TIME],
            late_deliveries=group["counts"][DELIVERY_LATE],
        )
        for org_unit_id, group in groups.items()
    ]
    return sorted(rows, key=lambda r: (r.org_unit_name.lower(), str(r.org_unit_id)))


def get_penalties(
    db: Session, date_from: date | None = None, date_to: date | None = None
) -> list[PenaltyReportRow]:
    """Return applied penalties, most recently registered non-compliance first.

    The range filters on the non-compliance registration date.
    """
    query = (
        db.query(Penalty, NonCompliance, Obligation.contract_id)
        .join(NonCompliance, Penalty.non_compliance_id == NonCompliance.id)
        .join(Obligation, NonCompliance.obligation_id == Obligation.id)
        .join(Contract, Obligation.contract_id == Contract.id)
        .filter(*not_deleted(Penalty, NonCompliance, Obligation, Contract))
    )
    query = _apply_range(query, NonCompliance.registered_at, date_from, date_to)

    rows = query.order_by(NonCompliance.registered_at.desc(), Penalty.id).all()
    return [
        PenaltyReportRow(
            penalty_id=penalty.id,
            non_compliance_id=non_compliance.id,
            contract_id=contract_id,
            obligation_id=non_compliance.obligation_id,
            reason=non_compliance.reason,
            severity=non_compliance.severity,
            severity_level=severity_level(non_compliance.severity),
            registered_at=non_compliance.registered_at,
            type=penalty.type,
            legal_basis=penalty.legal_basis,
            amount=float(penalty.amount) if penalty.amount is not None else None,
        )
        for penalty, non_compliance, contract_id in rows
    ]
