"""
Deliverables and inspections — service layer.

A deliverable is completed once ``delivered_at`` is recorded.  Deleting a
deliverable soft-deletes its inspections but leaves its evidence alone;
evidence is removed through its own endpoint, which also deletes the file.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from contractflow.models.contract import Contract
from contractflow.models.deliverable import Deliverable
from contractflow.models.inspection import Inspection
from contractflow.models.obligation import Obligation
from contractflow.repository import Repository, commit, not_deleted
from contractflow.schemas.deliverable import (
    DeliverableCreate,
    InspectionCreate,
    InspectionUpdate,
    MarkDeliveredRequest,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Deliverables
# ---------------------------------------------------------------------------


def list_for_contract(db: Session, contract_id: uuid.UUID) -> list[Deliverable]:
    """Return every deliverable of a contract's obligations, by expected date.

    Raises:
        HTTPException 404: If the contract does not exist.
    """
    Repository(db, Contract).get_or_404(contract_id)
    return (
        db.query(Deliverable)
        .join(Obligation, Deliverable.obligation_id == Obligation.id)
        .filter(
            Obligation.contract_id == contract_id,
            *not_deleted(Deliverable, Obligation),
        )
        .order_by(Deliverable.expected_date)
        .all()
    )


def list_for_obligation(db: Session, obligation_id: uuid.UUID) -> list[Deliverable]:
    Repository(db, Obligation).get_or_404(obligation_id)
    return Repository(db, Deliverable).list(
        Deliverable.obligation_id == obligation_id,
        order_by=(Deliverable.expected_date,),
    )


def get_deliverable(db: Session, deliverable_id: uuid.UUID) -> Deliverable:
    return Repository(db, Deliverable).get_or_404(deliverable_id)


def create_deliverable(
    db: Session, obligation_id: uuid.UUID, data: DeliverableCreate
) -> Deliverable:
    """Schedule a new deliverable under an obligation.

    Raises:
        HTTPException 404: If the obligation does not exist.
    """
    Repository(db, Obligation).get_or_404(obligation_id)

    deliverable = Repository(db, Deliverable).add(
        Deliverable(
            obligation_id=obligation_id,
            expected_date=data.expected_date,
            quantity=data.quantity,
            unit=data.unit.strip(),
        )
    )
    commit(db)
    db.refresh(deliverable)

    logger.info(
        "create_deliverable: id=%s obligation_id=%s expected=%s",
        deliverable.id, obligation_id, deliverable.expected_date.date(),
    )
    return deliverable


def mark_delivered(
    db: Session, deliverable_id: uuid.UUID, data: MarkDeliveredRequest
) -> Deliverable:
    """Record the delivery timestamp; a later call overwrites the earlier one."""
    deliverable = get_deliverable(db, deliverable_id)
    deliverable.delivered_at = data.delivered_at
    deliverable.touch()
    commit(db)

    logger.info(
        "mark_delivered: id=%s delivered_at=%s", deliverable_id, data.delivered_at
    )
    return deliverable


def delete_deliverable(db: Session, deliverable_id: uuid.UUID) -> None:
    repo = Repository(db, Deliverable)
    flagged = repo.soft_delete(repo.get_or_404(deliverable_id))
    commit(db)
    logger.info("delete_deliverable: id=%s (%d rows flagged)", deliverable_id, len(flagged))


# ---------------------------------------------------------------------------
# Inspections
# ---------------------------------------------------------------------------


def list_inspections(db: Session, deliverable_id: uuid.UUID) -> list[Inspection]:
    """Return a deliverable's inspections, most recent first."""
    get_deliverable(db, deliverable_id)
    return Repository(db, Inspection).list(
        Inspection.deliverable_id == deliverable_id,
        order_by=(Inspection.date.desc(),),
    )


def get_inspection(db: Session, inspection_id: uuid.UUID) -> Inspection:
    return Repository(db, Inspection).get_or_404(inspection_id)


def create_inspection(
    db: Session, deliverable_id: uuid.UUID, data: InspectionCreate
) -> Inspection:
    get_deliverable(db, deliverable_id)

    inspection = Repository(db, Inspection).add(
        Inspection(
            deliverable_id=deliverable_id,
            date=data.date,
            inspector=data.inspector.strip(),
            notes=data.notes,
        )
    )
    commit(db)
    db.refresh(inspection)

    logger.info(
        "create_inspection: id=%s deliverable_id=%s", inspection.id, deliverable_id
    )
    return inspection


def update_inspection(
    db: Session, inspection_id: uuid.UUID, data: InspectionUpdate
) -> Inspection:
    inspection = get_inspection(db, inspection_id)
    inspection.date = data.date
    inspection.inspector = data.inspector.strip()
    inspection.notes = data.notes
    inspection.touch()
    commit(db)

    logger.info("update_inspection: id=%s", inspection_id)
    return inspection


def delete_inspection(db: Session, inspection_id: uuid.UUID) -> None:
    repo = Repository(db, Inspection)
    repo.soft_delete(repo.get_or_404(inspection_id))
    commit(db)
    logger.info("delete_inspection: id=%s", inspection_id)
