"""Pydantic v2 schemas for deliverables and inspections."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from contractflow.schemas.common import ApiModel, UtcDateTime


# ---------------------------------------------------------------------------
# Deliverable
# ---------------------------------------------------------------------------


class DeliverableCreate(ApiModel):
    """Payload for ``POST /api/obligations/{id}/deliverables``.

    Attributes:
        expected_date: When the delivery is due.
        quantity: Expected quantity (non-negative).
        unit: Unit of measure, e.g. ``"un"``.
    """

    expected_date: UtcDateTime
    quantity: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    unit: str = Field(..., min_length=1, max_length=20)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"expectedDate": "2024-02-01", "quantity": 10, "unit": "un"}
        }
    )


class MarkDeliveredRequest(ApiModel):
    """Payload for ``PUT /api/deliverables/{id}/delivered``."""

    delivered_at: UtcDateTime


class DeliverableResponse(ApiModel):
    id: uuid.UUID
    obligation_id: uuid.UUID
    expected_date: datetime
    quantity: float
    unit: str
    delivered_at: datetime | None = None


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


class InspectionCreate(ApiModel):
    """Payload for creating or replacing an inspection.

    Attributes:
        date: When the inspection took place.
        inspector: Name of the person who inspected the deliverable.
        notes: Optional findings.
    """

    date: UtcDateTime
    inspector: str = Field(..., min_length=1, max_length=200)
    notes: str | None = Field(default=None, max_length=2000)


InspectionUpdate = InspectionCreate


class InspectionResponse(ApiModel):
    id: uuid.UUID
    deliverable_id: uuid.UUID
    date: datetime
    inspector: str
    notes: str | None = None
