"""
Deliverables and inspections router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /contracts/{id}/deliverables     — Every deliverable of a contract.
GET    /obligations/{id}/deliverables   — Deliverables of an obligation.
POST   /obligations/{id}/deliverables   — Schedule a deliverable.
GET    /deliverables/{id}               — One deliverable.
PUT    /deliverables/{id}/delivered     — Record the delivery timestamp.
DELETE /deliverables/{id}               — Soft-delete with its inspections.
GET    /deliverables/{id}/inspections   — Inspections, most recent first.
POST   /deliverables/{id}/inspections   — Record an inspection.
GET    /inspections/{id}                — One inspection.
PUT    /inspections/{id}                — Replace an inspection's fields.
DELETE /inspections/{id}                — Soft-delete an inspection.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from contractflow.database import get_db
from contractflow.schemas.common import CreatedResponse
from contractflow.schemas.deliverable import (
    DeliverableCreate,
    DeliverableResponse,
    InspectionCreate,
    InspectionResponse,
    InspectionUpdate,
    MarkDeliveredRequest,
)
from contractflow.services import deliverable_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Deliverables"])

ContractId = Annotated[uuid.UUID, Path(description="Contract identifier.")]
ObligationId = Annotated[uuid.UUID, Path(description="Obligation identifier.")]
DeliverableId = Annotated[uuid.UUID, Path(description="Deliverable identifier.")]
InspectionId = Annotated[uuid.UUID, Path(description="Inspection identifier.")]


# ---------------------------------------------------------------------------
# Deliverables
# ---------------------------------------------------------------------------


@router.get(
    "/contracts/{contract_id}/deliverables",
    response_model=list[DeliverableResponse],
    summary="List the deliverables of a contract",
    description="Deliverables of all non-deleted obligations, by expected date.",
    responses={404: {"description": "Contract not found."}},
)
def list_contract_deliverables(
    contract_id: ContractId,
    db: Annotated[Session, Depends(get_db)],
) -> list[DeliverableResponse]:
    logger.debug("GET /contracts/%s/deliverables", contract_id)
    return deliverable_service.list_for_contract(db, contract_id)


@router.get(
    "/obligations/{obligation_id}/deliverables",
    response_model=list[DeliverableResponse],
    summary="List the deliverables of an obligation",
    responses={404: {"description": "Obligation not found."}},
)
def list_obligation_deliverables(
    obligation_id: ObligationId,
    db: Annotated[Session, Depends(get_db)],
) -> list[DeliverableResponse]:
    return deliverable_service.list_for_obligation(db, obligation_id)


@router.post(
    "/obligations/{obligation_id}/deliverables",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a deliverable",
    responses={
        201: {"description": "Deliverable created; body holds its id."},
        400: {"description": "Invalid payload (negative quantity, bad date)."},
        404: {"description": "Obligation not found."},
    },
)
def create_deliverable(
    obligation_id: ObligationId,
    body: DeliverableCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    deliverable = deliverable_service.create_deliverable(db, obligation_id, body)
    return CreatedResponse(id=deliverable.id)


@router.get(
    "/deliverables/{deliverable_id}",
    response_model=DeliverableResponse,
    summary="Get a deliverable",
    responses={404: {"description": "Deliverable not found."}},
)
def get_deliverable(
    deliverable_id: DeliverableId,
    db: Annotated[Session, Depends(get_db)],
) -> DeliverableResponse:
    return deliverable_service.get_deliverable(db, deliverable_id)


@router.put(
    "/deliverables/{deliverable_id}/delivered",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a deliverable as delivered",
    description="Records `deliveredAt`; calling it again overwrites the timestamp.",
    responses={
        204: {"description": "Delivery recorded."},
        404: {"description": "Deliverable not found."},
    },
)
def mark_delivered(
    deliverable_id: DeliverableId,
    body: MarkDeliveredRequest,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    deliverable_service.mark_delivered(db, deliverable_id, body)


@router.delete(
    "/deliverables/{deliverable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a deliverable",
    description="Inspections are deleted with it; evidence is kept.",
    responses={
        204: {"description": "Deliverable deleted."},
        404: {"description": "Deliverable not found."},
    },
)
def delete_deliverable(
    deliverable_id: DeliverableId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    deliverable_service.delete_deliverable(db, deliverable_id)


# ---------------------------------------------------------------------------
# Inspections
# ---------------------------------------------------------------------------


@router.get(
    "/deliverables/{deliverable_id}/inspections",
    response_model=list[InspectionResponse],
    tags=["Inspections"],
    summary="List the inspections of a deliverable",
    responses={404: {"description": "Deliverable not found."}},
)
def list_inspections(
    deliverable_id: DeliverableId,
    db: Annotated[Session, Depends(get_db)],
) -> list[InspectionResponse]:
    return deliverable_service.list_inspections(db, deliverable_id)


@router.post(
    "/deliverables/{deliverable_id}/inspections",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Inspections"],
    summary="Record an inspection",
    responses={
        201: {"description": "Inspection created; body holds its id."},
        404: {"description": "Deliverable not found."},
    },
)
def create_inspection(
    deliverable_id: DeliverableId,
    body: InspectionCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    inspection = deliverable_service.create_inspection(db, deliverable_id, body)
    return CreatedResponse(id=inspection.id)


@router.get(
    "/inspections/{inspection_id}",
    response_model=InspectionResponse,
    tags=["Inspections"],
    summary="Get an inspection",
    responses={404: {"description": "Inspection not found."}},
)
def get_inspection(
    inspection_id: InspectionId,
    db: Annotated[Session, Depends(get_db)],
) -> InspectionResponse:
    return deliverable_service.get_inspection(db, inspection_id)


@router.put(
    "/inspections/{inspection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Inspections"],
    summary="Update an inspection",
    responses={
        204: {"description": "Inspection updated."},
        404: {"description": "Inspection not found."},
    },
)
def update_inspection(
    inspection_id: InspectionId,
    body: InspectionUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    deliverable_service.update_inspection(db, inspection_id, body)


@router.delete(
    "/inspections/{inspection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Inspections"],
    summary="Delete an inspection",
    responses={
        204: {"description": "Inspection deleted."},
        404: {"description": "Inspection not found."},
    },
)
def delete_inspection(
    inspection_id: InspectionId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    deliverable_service.delete_inspection(db, inspection_id)
