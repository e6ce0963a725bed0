"""Pydantic v2 schemas for obligations (contract clauses)."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field

from contractflow.schemas.common import ApiModel, UtcDateTime


class ObligationCreate(ApiModel):
    """Payload for ``POST /api/contracts/{id}/obligations``.

    Attributes:
        clause_ref: Clause reference, e.g. ``"Clause 1"``.
        description: What the supplier must do.
        due_date: Optional deadline for the whole obligation.
        status: Optional progress label, ``"Pending"`` when omitted.
    """

    clause_ref: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=2000)
    due_date: UtcDateTime | None = None
    status: str | None = Field(default=None, max_length=30)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "clauseRef": "Clause 1",
                "description": "Monthly cleaning service report",
                "dueDate": "2024-12-31",
                "status": None,
            }
        }
    )


class ObligationUpdate(ApiModel):
    """Payload for ``PUT /api/obligations/{id}``; replaces every field."""

    clause_ref: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=2000)
    due_date: UtcDateTime | None = None
    status: str = Field(..., min_length=1, max_length=30)


class ObligationResponse(ApiModel):
    id: uuid.UUID
    contract_id: uuid.UUID
    clause_ref: str
    description: str
    due_date: datetime | None = None
    status: str
