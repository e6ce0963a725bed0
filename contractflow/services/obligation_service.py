"""Obligations — service layer for ``/api/contracts/{id}/obligations`` and ``/api/obligations``."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from contractflow.models.contract import Contract
from contractflow.models.obligation import Obligation
from contractflow.repository import Repository, commit
from contractflow.schemas.obligation import ObligationCreate, ObligationUpdate
from contractflow.utils.constants import OBLIGATION_DEFAULT_STATUS

logger = logging.getLogger(__name__)


def list_for_contract(db: Session, contract_id: uuid.UUID) -> list[Obligation]:
    """Return the contract's non-deleted obligations ordered by clause reference.

    Raises:
        HTTPException 404: If the contract does not exist.
    """
    Repository(db, Contract).get_or_404(contract_id)
    return Repository(db, Obligation).list(
        Obligation.contract_id == contract_id,
        order_by=(Obligation.clause_ref, Obligation.created_at),
    )


def get_obligation(db: Session, obligation_id: uuid.UUID) -> Obligation:
    return Repository(db, Obligation).get_or_404(obligation_id)


def create_obligation(
    db: Session, contract_id: uuid.UUID, data: ObligationCreate
) -> Obligation:
    """Add an obligation to a contract.

    Raises:
        HTTPException 404: If the contract does not exist.
    """
    Repository(db, Contract).get_or_404(contract_id)

    status_label = (data.status or "").strip() or OBLIGATION_DEFAULT_STATUS
    obligation = Repository(db, Obligation).add(
        Obligation(
            contract_id=contract_id,
            clause_ref=data.clause_ref.strip(),
            description=data.description.strip(),
            due_date=data.due_date,
            status=status_label,
        )
    )
    commit(db)
    db.refresh(obligation)

    logger.info(
        "create_obligation: id=%s contract_id=%s clause=%s",
        obligation.id, contract_id, obligation.clause_ref,
    )
    return obligation


def update_obligation(
    db: Session, obligation_id: uuid.UUID, data: ObligationUpdate
) -> Obligation:
    obligation = get_obligation(db, obligation_id)
    obligation.clause_ref = data.clause_ref.strip()
    obligation.description = data.description.strip()
    obligation.due_date = data.due_date
    obligation.status = data.status.strip()
    obligation.touch()
    commit(db)

    logger.info("update_obligation: id=%s status=%s", obligation_id, data.status)
    return obligation


def delete_obligation(db: Session, obligation_id: uuid.UUID) -> None:
    """Soft-delete an obligation with its deliverables and non-compliances."""
    repo = Repository(db, Obligation)
    flagged = repo.soft_delete(repo.get_or_404(obligation_id))
    commit(db)
    logger.info("delete_obligation: id=%s (%d rows flagged)", obligation_id, len(flagged))
