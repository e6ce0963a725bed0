"""
Alerts router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /alerts       — Live alerts, newest first (optional ``contractId`` /
                       ``deliverableId`` filters).
POST   /alerts/scan  — Run the due-items scan now and return its alerts.
DELETE /alerts/{id}  — Dismiss an alert (soft delete).
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from contractflow.config import Settings, get_settings
from contractflow.database import get_db
from contractflow.schemas.alert import AlertResponse, AlertScanResponse
from contractflow.services import alert_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Alerts"])


# ---------------------------------------------------------------------------
# GET /alerts
# ---------------------------------------------------------------------------


@router.get(
    "/alerts",
    response_model=list[AlertResponse],
    summary="List alerts",
    description=(
        "Returns non-dismissed alerts, most recent first. Combine "
        "`contractId` and `deliverableId` to narrow the list."
    ),
)
def list_alerts(
    db: Annotated[Session, Depends(get_db)],
    contract_id: Annotated[
        uuid.UUID | None,
        Query(alias="contractId", description="Only alerts about this contract."),
    ] = None,
    deliverable_id: Annotated[
        uuid.UUID | None,
        Query(alias="deliverableId", description="Only alerts about this deliverable."),
    ] = None,
) -> list[AlertResponse]:
    logger.debug(
        "GET /alerts contract_id=%s deliverable_id=%s", contract_id, deliverable_id
    )
    return alert_service.list_alerts(db, contract_id=contract_id, deliverable_id=deliverable_id)


# ---------------------------------------------------------------------------
# POST /alerts/scan
# ---------------------------------------------------------------------------


@router.post(
    "/alerts/scan",
    response_model=AlertScanResponse,
    summary="Run the alert scan now",
    description=(
        "Runs the same scan as the daily job: undelivered deliverables and "
        "contract terms that are overdue or due within the look-ahead window "
        "each produce one alert."
    ),
    responses={500: {"description": "The scan failed and was rolled back."}},
)
def scan_alerts(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AlertScanResponse:
    """Trigger an on-demand alert scan.

    Args:
        db: Database session; the scan commits it once.
        settings: Provides the look-ahead window and de-duplication flag.

    Returns:
        The number of generated alerts and the alerts themselves.
    """
    logger.info("POST /alerts/scan")
    alerts = alert_service.scan_due_items(
        db,
        lookahead_days=settings.ALERT_LOOKAHEAD_DAYS,
        deduplicate=settings.ALERT_DEDUPLICATE,
    )
    return AlertScanResponse(
        generated=len(alerts),
        alerts=[AlertResponse.model_validate(alert) for alert in alerts],
    )


# ---------------------------------------------------------------------------
# DELETE /alerts/{id}
# ---------------------------------------------------------------------------


@router.delete(
    "/alerts/{alert_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss an alert",
    responses={
        204: {"description": "Alert dismissed."},
        404: {"description": "Alert not found."},
    },
)
def delete_alert(
    alert_id: Annotated[uuid.UUID, Path(description="Alert identifier.")],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    alert_service.delete_alert(db, alert_id)
