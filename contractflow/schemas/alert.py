"""
Pydantic v2 schemas for the Alerts module.

Alerts are produced by the scan job (``alert_service.scan_due_items``) on
its daily schedule or on demand through ``POST /api/alerts/scan``.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field

from contractflow.schemas.common import ApiModel


class AlertResponse(ApiModel):
    """Full representation of a single alert.

    Attributes:
        message: Human-readable notice.
        contract_id: Contract the alert is about, when it concerns a term end.
        deliverable_id: Deliverable the alert is about, when it concerns a
                        delivery date.
        target_date: Deadline that triggered the alert.
        created_at: When the scan generated the alert.
    """

    id: uuid.UUID
    message: str
    contract_id: uuid.UUID | None = None
    deliverable_id: uuid.UUID | None = None
    target_date: datetime
    created_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1d0c7f55-2b7e-4a39-8a0d-3c1e9b7f6a21",
                "message": (
                    "Deliverable 9b2f6c1e-7d4a-4f3b-a2c8-1e5d7f9a0b33 is overdue "
                    "(expected 2024-02-01)."
                ),
                "contractId": None,
                "deliverableId": "9b2f6c1e-7d4a-4f3b-a2c8-1e5d7f9a0b33",
                "targetDate": "2024-02-01T00:00:00",
                "createdAt": "2024-02-02T08:30:00",
            }
        }
    )


class AlertScanResponse(ApiModel):
    """Result of an on-demand scan: the alerts it generated."""

    generated: int = Field(..., ge=0, description="Number of alerts created by the run.")
    alerts: list[AlertResponse] = Field(default_factory=list)
