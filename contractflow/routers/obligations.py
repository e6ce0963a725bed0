"""
Obligations router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /contracts/{id}/obligations  — Obligations of a contract.
POST   /contracts/{id}/obligations  — Add an obligation to a contract.
GET    /obligations/{id}            — One obligation.
PUT    /obligations/{id}            — Replace an obligation's fields.
DELETE /obligations/{id}            — Soft-delete with deliverables and
                                      non-compliances.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from contractflow.database import get_db
from contractflow.schemas.common import CreatedResponse
from contractflow.schemas.obligation import (
    ObligationCreate,
    ObligationResponse,
    ObligationUpdate,
)
from contractflow.services import obligation_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Obligations"])

ContractId = Annotated[uuid.UUID, Path(description="Contract identifier.")]
ObligationId = Annotated[uuid.UUID, Path(description="Obligation identifier.")]


@router.get(
    "/contracts/{contract_id}/obligations",
    response_model=list[ObligationResponse],
    summary="List the obligations of a contract",
    responses={404: {"description": "Contract not found."}},
)
def list_obligations(
    contract_id: ContractId,
    db: Annotated[Session, Depends(get_db)],
) -> list[ObligationResponse]:
    logger.debug("GET /contracts/%s/obligations", contract_id)
    return obligation_service.list_for_contract(db, contract_id)


@router.post(
    "/contracts/{contract_id}/obligations",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an obligation to a contract",
    description="Status defaults to `Pending` when omitted.",
    responses={
        201: {"description": "Obligation created; body holds its id."},
        404: {"description": "Contract not found."},
    },
)
def create_obligation(
    contract_id: ContractId,
    body: ObligationCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    obligation = obligation_service.create_obligation(db, contract_id, body)
    return CreatedResponse(id=obligation.id)


@router.get(
    "/obligations/{obligation_id}",
    response_model=ObligationResponse,
    summary="Get an obligation",
    responses={404: {"description": "Obligation not found."}},
)
def get_obligation(
    obligation_id: ObligationId,
    db: Annotated[Session, Depends(get_db)],
) -> ObligationResponse:
    return obligation_service.get_obligation(db, obligation_id)


@router.put(
    "/obligations/{obligation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update an obligation",
    description=(
        "Replaces clause reference, description, due date and status. "
        "A status of `Completed` (any case) counts the obligation as done "
        "in the contract status report."
    ),
    responses={
        204: {"description": "Obligation updated."},
        404: {"description": "Obligation not found."},
    },
)
def update_obligation(
    obligation_id: ObligationId,
    body: ObligationUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    obligation_service.update_obligation(db, obligation_id, body)


@router.delete(
    "/obligations/{obligation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an obligation",
    responses={
        204: {"description": "Obligation and its children deleted."},
        404: {"description": "Obligation not found."},
    },
)
def delete_obligation(
    obligation_id: ObligationId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    obligation_service.delete_obligation(db, obligation_id)
