"""Pydantic v2 schemas for suppliers and organisational units (master data)."""

from __future__ import annotations

import uuid

from pydantic import ConfigDict, Field

from contractflow.schemas.common import ApiModel


# ---------------------------------------------------------------------------
# Supplier
# ---------------------------------------------------------------------------


class SupplierCreate(ApiModel):
    """Payload for ``POST /api/suppliers`` and ``PUT /api/suppliers/{id}``.

    The tax id travels as ``cnpj`` on the wire, the Brazilian company
    registration number.

    Attributes:
        corporate_name: Legal company name.
        tax_id: Unique tax identification number.
        active: Whether the supplier may be used on new contracts.
    """

    corporate_name: str = Field(..., min_length=1, max_length=300)
    tax_id: str = Field(..., alias="cnpj", min_length=1, max_length=20)
    active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "corporateName": "Acme Ltda",
                "cnpj": "12.345.678/0001-90",
                "active": True,
            }
        }
    )


SupplierUpdate = SupplierCreate


class SupplierResponse(ApiModel):
    id: uuid.UUID
    corporate_name: str
    tax_id: str = Field(..., alias="cnpj")
    active: bool


# ---------------------------------------------------------------------------
# OrgUnit
# ---------------------------------------------------------------------------


class OrgUnitCreate(ApiModel):
    """Payload for ``POST /api/orgunits`` and ``PUT /api/orgunits/{id}``.

    Attributes:
        name: Unit name.
        code: Optional short code; unique among all units when present.
    """

    name: str = Field(..., min_length=1, max_length=200)
    code: str | None = Field(default=None, max_length=50)

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Dept A", "code": "D1"}}
    )


OrgUnitUpdate = OrgUnitCreate


class OrgUnitResponse(ApiModel):
    id: uuid.UUID
    name: str
    code: str | None = None
