"""
Master data — service layer for suppliers and organisational units.

Both entities are leaves of the contract aggregate: contracts reference
them, but deleting one never touches a contract.  Uniqueness of the supplier
tax id and of the org-unit code is checked against every row, soft-deleted
ones included, so a deleted record keeps holding its value (the database
unique constraints agree).
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from contractflow.models.org_unit import OrgUnit
from contractflow.models.supplier import Supplier
from contractflow.repository import Repository, commit
from contractflow.schemas.master_data import (
    OrgUnitCreate,
    OrgUnitUpdate,
    SupplierCreate,
    SupplierUpdate,
)

logger = logging.getLogger(__name__)


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------


def list_suppliers(db: Session) -> list[Supplier]:
    return Repository(db, Supplier).list(order_by=(Supplier.corporate_name,))


def get_supplier(db: Session, supplier_id: uuid.UUID) -> Supplier:
    return Repository(db, Supplier).get_or_404(supplier_id)


def _ensure_tax_id_free(
    repo: Repository, tax_id: str, exclude_id: uuid.UUID | None = None
) -> None:
    criteria = [Supplier.tax_id == tax_id]
    if exclude_id is not None:
        criteria.append(Supplier.id != exclude_id)
    if repo.exists(*criteria, exclude_deleted=False):
        raise _conflict(f"A supplier with tax id '{tax_id}' already exists.")


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    """Register a new supplier.

    Raises:
        HTTPException 409: If the tax id is already registered.
    """
    repo = Repository(db, Supplier)
    tax_id = data.tax_id.strip()
    _ensure_tax_id_free(repo, tax_id)

    supplier = repo.add(
        Supplier(
            corporate_name=data.corporate_name.strip(),
            tax_id=tax_id,
            active=data.active,
        )
    )
    commit(db, f"A supplier with tax id '{tax_id}' already exists.")
    db.refresh(supplier)

    logger.info("create_supplier: id=%s tax_id=%s", supplier.id, supplier.tax_id)
    return supplier


def update_supplier(db: Session, supplier_id: uuid.UUID, data: SupplierUpdate) -> Supplier:
    """Replace the fields of an existing supplier.

    Raises:
        HTTPException 404: If the supplier does not exist.
        HTTPException 409: If the new tax id belongs to another supplier.
    """
    repo = Repository(db, Supplier)
    supplier = repo.get_or_404(supplier_id)
    tax_id = data.tax_id.strip()
    _ensure_tax_id_free(repo, tax_id, exclude_id=supplier_id)

    supplier.corporate_name = data.corporate_name.strip()
    supplier.tax_id = tax_id
    supplier.active = data.active
    supplier.touch()
    commit(db, f"A supplier with tax id '{tax_id}' already exists.")

    logger.info("update_supplier: id=%s", supplier_id)
    return supplier


def delete_supplier(db: Session, supplier_id: uuid.UUID) -> None:
    repo = Repository(db, Supplier)
    repo.soft_delete(repo.get_or_404(supplier_id))
    commit(db)
    logger.info("delete_supplier: id=%s", supplier_id)


# ---------------------------------------------------------------------------
# Org units
# ---------------------------------------------------------------------------


def _normalise_code(code: str | None) -> str | None:
    if code is None or not code.strip():
        return None
    return code.strip()


def _ensure_code_free(
    repo: Repository, code: str | None, exclude_id: uuid.UUID | None = None
) -> None:
    if code is None:
        return
    criteria = [OrgUnit.code == code]
    if exclude_id is not None:
        criteria.append(OrgUnit.id != exclude_id)
    if repo.exists(*criteria, exclude_deleted=False):
        raise _conflict(f"An org unit with code '{code}' already exists.")


def list_org_units(db: Session) -> list[OrgUnit]:
    return Repository(db, OrgUnit).list(order_by=(OrgUnit.name,))


def get_org_unit(db: Session, org_unit_id: uuid.UUID) -> OrgUnit:
    return Repository(db, OrgUnit).get_or_404(org_unit_id)


def create_org_unit(db: Session, data: OrgUnitCreate) -> OrgUnit:
    """Register a new organisational unit.

    Raises:
        HTTPException 409: If ``code`` is given and already in use.
    """
    repo = Repository(db, OrgUnit)
    code = _normalise_code(data.code)
    _ensure_code_free(repo, code)

    org_unit = repo.add(OrgUnit(name=data.name.strip(), code=code))
    commit(db, f"An org unit with code '{code}' already exists.")
    db.refresh(org_unit)

    logger.info("create_org_unit: id=%s code=%s", org_unit.id, org_unit.code)
    return org_unit


def update_org_unit(db: Session, org_unit_id: uuid.UUID, data: OrgUnitUpdate) -> OrgUnit:
    repo = Repository(db, OrgUnit)
    org_unit = repo.get_or_404(org_unit_id)
    code = _normalise_code(data.code)
    _ensure_code_free(repo, code, exclude_id=org_unit_id)

    org_unit.name = data.name.strip()
    org_unit.code = code
    org_unit.touch()
    commit(db, f"An org unit with code '{code}' already exists.")

    logger.info("update_org_unit: id=%s", org_unit_id)
    return org_unit


def delete_org_unit(db: Session, org_unit_id: uuid.UUID) -> None:
    repo = Repository(db, OrgUnit)
    repo.soft_delete(repo.get_or_404(org_unit_id))
    commit(db)
    logger.info("delete_org_unit: id=%s", org_unit_id)
