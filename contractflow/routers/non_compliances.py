"""
Non-compliances and penalties router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /obligations/{id}/noncompliances  — Non-compliances, most recent first.
POST   /obligations/{id}/noncompliances  — Register a non-compliance.
GET    /noncompliances/{id}              — One non-compliance with its penalty.
PUT    /noncompliances/{id}              — Update reason and severity.
DELETE /noncompliances/{id}              — Soft-delete with its penalty.
POST   /noncompliances/{id}/penalties    — Apply the (single) penalty.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from contractflow.database import get_db
from contractflow.schemas.common import CreatedResponse
from contractflow.schemas.non_compliance import (
    NonComplianceCreate,
    NonComplianceResponse,
    NonComplianceUpdate,
    PenaltyCreate,
)
from contractflow.services import non_compliance_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Non-compliances"])

ObligationId = Annotated[uuid.UUID, Path(description="Obligation identifier.")]
NonComplianceId = Annotated[uuid.UUID, Path(description="Non-compliance identifier.")]


@router.get(
    "/obligations/{obligation_id}/noncompliances",
    response_model=list[NonComplianceResponse],
    summary="List the non-compliances of an obligation",
    responses={404: {"description": "Obligation not found."}},
)
def list_non_compliances(
    obligation_id: ObligationId,
    db: Annotated[Session, Depends(get_db)],
) -> list[NonComplianceResponse]:
    logger.debug("GET /obligations/%s/noncompliances", obligation_id)
    return non_compliance_service.list_for_obligation(db, obligation_id)


@router.post(
    "/obligations/{obligation_id}/noncompliances",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a non-compliance",
    description=(
        "Severity is free text. `Baixa`/`Low`, `Média`/`Medium`, `Alta`/`High` "
        "and `Crítica`/`Critical` are also classified into `severityLevel`."
    ),
    responses={
        201: {"description": "Non-compliance created; body holds its id."},
        404: {"description": "Obligation not found."},
    },
)
def create_non_compliance(
    obligation_id: ObligationId,
    body: NonComplianceCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    non_compliance = non_compliance_service.create_non_compliance(db, obligation_id, body)
    return CreatedResponse(id=non_compliance.id)


@router.get(
    "/noncompliances/{non_compliance_id}",
    response_model=NonComplianceResponse,
    summary="Get a non-compliance",
    responses={404: {"description": "Non-compliance not found."}},
)
def get_non_compliance(
    non_compliance_id: NonComplianceId,
    db: Annotated[Session, Depends(get_db)],
) -> NonComplianceResponse:
    return non_compliance_service.get_non_compliance(db, non_compliance_id)


@router.put(
    "/noncompliances/{non_compliance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a non-compliance",
    responses={
        204: {"description": "Non-compliance updated."},
        404: {"description": "Non-compliance not found."},
    },
)
def update_non_compliance(
    non_compliance_id: NonComplianceId,
    body: NonComplianceUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    non_compliance_service.update_non_compliance(db, non_compliance_id, body)


@router.delete(
    "/noncompliances/{non_compliance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a non-compliance",
    responses={
        204: {"description": "Non-compliance and its penalty deleted."},
        404: {"description": "Non-compliance not found."},
    },
)
def delete_non_compliance(
    non_compliance_id: NonComplianceId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    non_compliance_service.delete_non_compliance(db, non_compliance_id)


# ---------------------------------------------------------------------------
# POST /noncompliances/{id}/penalties
# ---------------------------------------------------------------------------


@router.post(
    "/noncompliances/{non_compliance_id}/penalties",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Penalties"],
    summary="Apply a penalty",
    description="A non-compliance carries at most one penalty.",
    responses={
        201: {"description": "Penalty created; body holds its id."},
        400: {"description": "The non-compliance already has a penalty."},
        404: {"description": "Non-compliance not found."},
    },
)
def apply_penalty(
    non_compliance_id: NonComplianceId,
    body: PenaltyCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    """Attach a penalty to a non-compliance.

    Args:
        non_compliance_id: The sanctioned non-compliance.
        body: Penalty type, optional legal basis and amount.
        db: Database session.

    Returns:
        The identifier of the new penalty.
    """
    logger.info(
        "POST /noncompliances/%s/penalties type=%s", non_compliance_id, body.type
    )
    penalty = non_compliance_service.apply_penalty(db, non_compliance_id, body)
    return CreatedResponse(id=penalty.id)
