"""
Non-compliances and penalties — service layer.

A non-compliance carries at most one penalty.  The rule is checked before
the insert and backed by the unique constraint on
``penalty.non_compliance_id``, so two concurrent requests cannot both
succeed; the loser receives the same 400 as a sequential second call and
the existing penalty is left untouched.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from contractflow.models.non_compliance import NonCompliance
from contractflow.models.obligation import Obligation
from contractflow.models.penalty import Penalty
from contractflow.repository import Repository, commit
from contractflow.schemas.non_compliance import (
    NonComplianceCreate,
    NonComplianceUpdate,
    PenaltyCreate,
)
from contractflow.utils.dates import utcnow

logger = logging.getLogger(__name__)

_DUPLICATE_PENALTY = "This non-compliance already has a penalty."


def list_for_obligation(db: Session, obligation_id: uuid.UUID) -> list[NonCompliance]:
    Repository(db, Obligation).get_or_404(obligation_id)
    return Repository(db, NonCompliance).list(
        NonCompliance.obligation_id == obligation_id,
        order_by=(NonCompliance.registered_at.desc(),),
    )


def get_non_compliance(db: Session, non_compliance_id: uuid.UUID) -> NonCompliance:
    return Repository(db, NonCompliance).get_or_404(non_compliance_id)


def create_non_compliance(
    db: Session, obligation_id: uuid.UUID, data: NonComplianceCreate
) -> NonCompliance:
    """Register a non-compliance against an obligation.

    Raises:
        HTTPException 404: If the obligation does not exist.
    """
    Repository(db, Obligation).get_or_404(obligation_id)

    non_compliance = Repository(db, NonCompliance).add(
        NonCompliance(
            obligation_id=obligation_id,
            reason=data.reason.strip(),
            severity=data.severity.strip(),
            registered_at=data.registered_at or utcnow(),
        )
    )
    commit(db)
    db.refresh(non_compliance)

    logger.info(
        "create_non_compliance: id=%s obligation_id=%s severity=%s",
        non_compliance.id, obligation_id, non_compliance.severity,
    )
    return non_compliance


def update_non_compliance(
    db: Session, non_compliance_id: uuid.UUID, data: NonComplianceUpdate
) -> NonCompliance:
    non_compliance = get_non_compliance(db, non_compliance_id)
    non_compliance.reason = data.reason.strip()
    non_compliance.severity = data.severity.strip()
    non_compliance.touch()
    commit(db)

    logger.info("update_non_compliance: id=%s", non_compliance_id)
    return non_compliance


def delete_non_compliance(db: Session, non_compliance_id: uuid.UUID) -> None:
    """Soft-delete a non-compliance together with its penalty."""
    repo = Repository(db, NonCompliance)
    repo.soft_delete(repo.get_or_404(non_compliance_id))
    commit(db)
    logger.info("delete_non_compliance: id=%s", non_compliance_id)


def apply_penalty(
    db: Session, non_compliance_id: uuid.UUID, data: PenaltyCreate
) -> Penalty:
    """Attach a penalty to a non-compliance.

    Args:
        db: Active SQLAlchemy session.
        non_compliance_id: The sanctioned non-compliance.
        data: Validated penalty payload.

    Returns:
        The new ``Penalty``.

    Raises:
        HTTPException 404: If the non-compliance does not exist.
        HTTPException 400: If the non-compliance already has a penalty.
    """
    get_non_compliance(db, non_compliance_id)

    repo = Repository(db, Penalty)
    if repo.exists(Penalty.non_compliance_id == non_compliance_id, exclude_deleted=False):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=_DUPLICATE_PENALTY
        )

    penalty = repo.add(
        Penalty(
            non_compliance_id=non_compliance_id,
            type=data.type.strip(),
            legal_basis=data.legal_basis,
            amount=data.amount,
        )
    )
    commit(db, _DUPLICATE_PENALTY, conflict_status=status.HTTP_400_BAD_REQUEST)
    db.refresh(penalty)

    logger.info(
        "apply_penalty: id=%s non_compliance_id=%s type=%s amount=%s",
        penalty.id, non_compliance_id, penalty.type, penalty.amount,
    )
    return penalty
