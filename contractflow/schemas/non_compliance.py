"""
Pydantic v2 schemas for non-compliances and penalties.

Severity is free text; responses also carry ``severityLevel``, the
classification onto ``low``/``medium``/``high``/``critical`` (``null`` when
the text is not a known label).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from contractflow.schemas.common import ApiModel, UtcDateTime


# ---------------------------------------------------------------------------
# Penalty
# ---------------------------------------------------------------------------


class PenaltyCreate(ApiModel):
    """Payload for ``POST /api/noncompliances/{id}/penalties``.

    Attributes:
        type: Kind of sanction, e.g. ``"Warning"`` or ``"Fine"``.
        legal_basis: Optional legal provision backing the sanction.
        amount: Optional fine amount (non-negative).
    """

    type: str = Field(..., min_length=1, max_length=60)
    legal_basis: str | None = Field(default=None, max_length=500)
    amount: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"type": "Fine", "legalBasis": "Art. 156", "amount": 500.00}
        }
    )


class PenaltyResponse(ApiModel):
    id: uuid.UUID
    non_compliance_id: uuid.UUID
    type: str
    legal_basis: str | None = None
    amount: float | None = None


# ---------------------------------------------------------------------------
# NonCompliance
# ---------------------------------------------------------------------------


class NonComplianceCreate(ApiModel):
    """Payload for ``POST /api/obligations/{id}/noncompliances``.

    ``registeredAt`` defaults to the current UTC time when omitted.
    """

    reason: str = Field(..., min_length=1, max_length=1000)
    severity: str = Field(..., min_length=1, max_length=20)
    registered_at: UtcDateTime | None = None


class NonComplianceUpdate(ApiModel):
    reason: str = Field(..., min_length=1, max_length=1000)
    severity: str = Field(..., min_length=1, max_length=20)


class NonComplianceResponse(ApiModel):
    id: uuid.UUID
    obligation_id: uuid.UUID
    reason: str
    severity: str
    severity_level: str | None = None
    registered_at: datetime
    penalty: PenaltyResponse | None = None
