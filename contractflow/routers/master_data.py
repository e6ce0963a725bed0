"""
Master data router: suppliers and organisational units.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /suppliers       — All suppliers, by corporate name.
POST   /suppliers       — Register a supplier (tax id travels as ``cnpj``).
GET    /suppliers/{id}  — One supplier.
PUT    /suppliers/{id}  — Replace a supplier's fields.
DELETE /suppliers/{id}  — Soft-delete a supplier.
GET    /orgunits        — All org units, by name.
POST   /orgunits        — Register an org unit.
GET    /orgunits/{id}   — One org unit.
PUT    /orgunits/{id}   — Replace an org unit's fields.
DELETE /orgunits/{id}   — Soft-delete an org unit.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from contractflow.database import get_db
from contractflow.schemas.common import CreatedResponse
from contractflow.schemas.master_data import (
    OrgUnitCreate,
    OrgUnitResponse,
    OrgUnitUpdate,
    SupplierCreate,
    SupplierResponse,
    SupplierUpdate,
)
from contractflow.services import master_data_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Master data"])

SupplierId = Annotated[uuid.UUID, Path(description="Supplier identifier.")]
OrgUnitId = Annotated[uuid.UUID, Path(description="Org unit identifier.")]


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------


@router.get(
    "/suppliers",
    response_model=list[SupplierResponse],
    summary="List suppliers",
)
def list_suppliers(
    db: Annotated[Session, Depends(get_db)],
) -> list[SupplierResponse]:
    logger.debug("GET /suppliers")
    return master_data_service.list_suppliers(db)


@router.post(
    "/suppliers",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a supplier",
    responses={
        201: {"description": "Supplier created; body holds its id."},
        409: {"description": "Tax id already registered."},
    },
)
def create_supplier(
    body: SupplierCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    supplier = master_data_service.create_supplier(db, body)
    return CreatedResponse(id=supplier.id)


@router.get(
    "/suppliers/{supplier_id}",
    response_model=SupplierResponse,
    summary="Get a supplier",
    responses={404: {"description": "Supplier not found."}},
)
def get_supplier(
    supplier_id: SupplierId,
    db: Annotated[Session, Depends(get_db)],
) -> SupplierResponse:
    return master_data_service.get_supplier(db, supplier_id)


@router.put(
    "/suppliers/{supplier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a supplier",
    responses={
        204: {"description": "Supplier updated."},
        404: {"description": "Supplier not found."},
        409: {"description": "Tax id already registered by another supplier."},
    },
)
def update_supplier(
    supplier_id: SupplierId,
    body: SupplierUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    master_data_service.update_supplier(db, supplier_id, body)


@router.delete(
    "/suppliers/{supplier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a supplier",
    description="Contracts that reference the supplier are left untouched.",
    responses={
        204: {"description": "Supplier deleted."},
        404: {"description": "Supplier not found."},
    },
)
def delete_supplier(
    supplier_id: SupplierId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    master_data_service.delete_supplier(db, supplier_id)


# ---------------------------------------------------------------------------
# Org units
# ---------------------------------------------------------------------------


@router.get(
    "/orgunits",
    response_model=list[OrgUnitResponse],
    summary="List org units",
)
def list_org_units(
    db: Annotated[Session, Depends(get_db)],
) -> list[OrgUnitResponse]:
    logger.debug("GET /orgunits")
    return master_data_service.list_org_units(db)


@router.post(
    "/orgunits",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an org unit",
    responses={
        201: {"description": "Org unit created; body holds its id."},
        409: {"description": "Code already in use."},
    },
)
def create_org_unit(
    body: OrgUnitCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedResponse:
    org_unit = master_data_service.create_org_unit(db, body)
    return CreatedResponse(id=org_unit.id)


@router.get(
    "/orgunits/{org_unit_id}",
    response_model=OrgUnitResponse,
    summary="Get an org unit",
    responses={404: {"description": "Org unit not found."}},
)
def get_org_unit(
    org_unit_id: OrgUnitId,
    db: Annotated[Session, Depends(get_db)],
) -> OrgUnitResponse:
    return master_data_service.get_org_unit(db, org_unit_id)


@router.put(
    "/orgunits/{org_unit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update an org unit",
    responses={
        204: {"description": "Org unit updated."},
        404: {"description": "Org unit not found."},
        409: {"description": "Code already in use by another unit."},
    },
)
def update_org_unit(
    org_unit_id: OrgUnitId,
    body: OrgUnitUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    master_data_service.update_org_unit(db, org_unit_id, body)


@router.delete(
    "/orgunits/{org_unit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an org unit",
    responses={
        204: {"description": "Org unit deleted."},
        404: {"description": "Org unit not found."},
    },
)
def delete_org_unit(
    org_unit_id: OrgUnitId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    master_data_service.delete_org_unit(db, org_unit_id)
