"""
Contracts router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /contracts              — Contract list with supplier and org-unit names.
POST   /contracts              — Create a contract (starts ``Active``).
GET    /contracts/stats        — Dashboard counters.
GET    /contracts/{id}         — Full details with obligations, deliverables,
                                 non-compliances and penalties.
PUT    /contracts/{id}/status  — Change the contract status.
DELETE /contracts/{id}         — Soft-delete the contract and its obligations.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from contractflow.config import Settings, get_settings
from contractflow.database import get_db
from contractflow.schemas.common import CreatedResponse
from contractflow.schemas.contract import (
    ContractCreate,
    ContractDetails,
    ContractListItem,
    ContractStats,
    ContractStatusUpdate,
)
from contractflow.services import contract_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contracts"])

ContractId = Annotated[uuid.UUID, Path(description="Contract identifier.")]


# ---------------------------------------------------------------------------
# GET /contracts
# ---------------------------------------------------------------------------


@router.get(
    "/contracts",
    response_model=list[ContractListItem],
    summary="List contracts",
    description=(
        "Returns every non-deleted contract, most recently created first, "
        "with the supplier and org-unit names resolved."
    ),
)
def list_contracts(
    db: Annotated[Session, Depends(get_db)],
) -> list[ContractListItem]:
    logger.debug("GET /contracts")
    return contract_service.list_contracts(db)


# ---------------------------------------------------------------------------
# POST /contracts
# ---------------------------------------------------------------------------


@router.post(
    "/contracts",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a contract",
    description=(
        "Creates a contract between a supplier and an org unit. The term end "
        "must be after its start and the total amount must not be negative. "
        "New contracts start in status `Active`."
    ),
    responses={
        201: {"description": "Contract created; body holds its id."},
        400: {"description": "Invalid payload (term, amount, enum values)."},
        404: {"description": "Supplier or org unit not found."},
        409: {"description": "Official number already in use."},
    },
)
def create_contract(
    body: ContractCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    """Create a new contract.

    Args:
        body: Validated creation payload.
        db: Database session injected by ``get_db``.

    Returns:
        The identifier of the new contract.
    """
    logger.info("POST /contracts number=%s", body.official_number)
    contract = contract_service.create_contract(db, body)
    return CreatedResponse(id=contract.id)


# ---------------------------------------------------------------------------
# GET /contracts/stats  (declared before /contracts/{id})
# ---------------------------------------------------------------------------


@router.get(
    "/contracts/stats",
    response_model=ContractStats,
    summary="Contract dashboard counters",
    description=(
        "Active contracts, undelivered deliverables due within the alert "
        "look-ahead window, and overdue deliverables."
    ),
)
def get_stats(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ContractStats:
    logger.debug("GET /contracts/stats")
    return contract_service.get_stats(db, lookahead_days=settings.ALERT_LOOKAHEAD_DAYS)


# ---------------------------------------------------------------------------
# GET /contracts/{id}
# ---------------------------------------------------------------------------


@router.get(
    "/contracts/{contract_id}",
    response_model=ContractDetails,
    summary="Contract details",
    description=(
        "Returns the contract header with supplier and org-unit data and its "
        "non-deleted obligations, each with deliverables and non-compliances."
    ),
    responses={404: {"description": "Contract not found."}},
)
def get_contract(
    contract_id: ContractId,
    db: Annotated[Session, Depends(get_db)],
) -> ContractDetails:
    logger.debug("GET /contracts/%s", contract_id)
    return contract_service.get_contract_details(db, contract_id)


# ---------------------------------------------------------------------------
# PUT /contracts/{id}/status
# ---------------------------------------------------------------------------


@router.put(
    "/contracts/{contract_id}/status",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change contract status",
    responses={
        204: {"description": "Status updated."},
        400: {"description": "Unknown status value."},
        404: {"description": "Contract not found."},
    },
)
def update_contract_status(
    contract_id: ContractId,
    body: ContractStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    contract_service.update_contract_status(db, contract_id, body)


# ---------------------------------------------------------------------------
# DELETE /contracts/{id}
# ---------------------------------------------------------------------------


@router.delete(
    "/contracts/{contract_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a contract",
    description=(
        "Soft-deletes the contract together with its obligations and, through "
        "them, their deliverables, inspections, non-compliances and penalties."
    ),
    responses={
        204: {"description": "Contract deleted."},
        404: {"description": "Contract not found."},
    },
)
def delete_contract(
    contract_id: ContractId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    contract_service.delete_contract(db, contract_id)
