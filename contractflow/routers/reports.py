"""
Reports router.

Mounts under ``/api`` (prefix set in ``main.py``).

Every report accepts optional ``from``/``to`` ISO dates (inclusive, whole
days).  A range whose start is after its end is answered with 400.

Endpoints
---------
GET /reports/due-deliverables         — Undelivered deliverables with status.
GET /reports/contract-status          — Obligation progress per contract.
GET /reports/contract-status-summary  — Contract count per status.
GET /reports/deliveries-by-supplier   — Punctuality per supplier.
GET /reports/deliveries-by-orgunit    — Punctuality per org unit.
GET /reports/penalties                — Applied penalties.
GET /reports/{report}/export          — Any report above (except the
                                        summary) as an ``.xlsx`` download.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from contractflow.database import get_db
from contractflow.schemas.report import (
    ContractStatusRow,
    ContractStatusSummaryRow,
    DeliveryByOrgUnitRow,
    DeliveryBySupplierRow,
    DueDeliverableRow,
    PenaltyReportRow,
)
from contractflow.services import export_service, report_service
from contractflow.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reports"])

DateFrom = Annotated[
    date | None,
    Query(alias="from", description="First day of the range (inclusive), e.g. 2024-01-01."),
]
DateTo = Annotated[
    date | None,
    Query(alias="to", description="Last day of the range (inclusive), e.g. 2024-12-31."),
]

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _make_filename(report: str) -> str:
    """Build a timestamped file name, e.g. ``contractflow_penalties_2024-02-17.xlsx``."""
    today = utcnow().date().isoformat()
    return f"contractflow_{report.lower()}_{today}.xlsx"


# ---------------------------------------------------------------------------
# JSON reports
# ---------------------------------------------------------------------------


@router.get(
    "/reports/due-deliverables",
    response_model=list[DueDeliverableRow],
    summary="Due deliverables",
    description=(
        "Undelivered deliverables whose expected date falls in the range, "
        "ascending by expected date. `status` is `overdue` when the expected "
        "date has passed, `pending` otherwise."
    ),
    responses={400: {"description": "Invalid date range."}},
)
def due_deliverables(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[DueDeliverableRow]:
    logger.debug("GET /reports/due-deliverables from=%s to=%s", date_from, date_to)
    return report_service.get_due_deliverables(db, date_from, date_to)


@router.get(
    "/reports/contract-status",
    response_model=list[ContractStatusRow],
    summary="Contract status",
    description=(
        "Per contract whose term overlaps the range: total obligations and "
        "completed obligations. An obligation is completed when its status is "
        "`Completed`, or when it has deliverables and all are delivered."
    ),
    responses={400: {"description": "Invalid date range."}},
)
def contract_status(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[ContractStatusRow]:
    logger.debug("GET /reports/contract-status from=%s to=%s", date_from, date_to)
    return report_service.get_contract_status(db, date_from, date_to)


@router.get(
    "/reports/contract-status-summary",
    response_model=list[ContractStatusSummaryRow],
    summary="Contract status summary",
    description="Number of contracts per status among those whose term overlaps the range.",
    responses={400: {"description": "Invalid date range."}},
)
def contract_status_summary(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[ContractStatusSummaryRow]:
    return report_service.get_contract_status_summary(db, date_from, date_to)


@router.get(
    "/reports/deliveries-by-supplier",
    response_model=list[DeliveryBySupplierRow],
    summary="Deliveries by supplier",
    description=(
        "Deliverables expected in the range grouped by supplier. A delivery is "
        "on time when delivered on or before its expected date, late when "
        "delivered after it or still undelivered past it."
    ),
    responses={400: {"description": "Invalid date range."}},
)
def deliveries_by_supplier(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[DeliveryBySupplierRow]:
    return report_service.get_deliveries_by_supplier(db, date_from, date_to)


@router.get(
    "/reports/deliveries-by-orgunit",
    response_model=list[DeliveryByOrgUnitRow],
    summary="Deliveries by org unit",
    description="Same classification as deliveries by supplier, grouped by org unit.",
    responses={400: {"description": "Invalid date range."}},
)
def deliveries_by_org_unit(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[DeliveryByOrgUnitRow]:
    return report_service.get_deliveries_by_org_unit(db, date_from, date_to)


@router.get(
    "/reports/penalties",
    response_model=list[PenaltyReportRow],
    summary="Penalties",
    description="Applied penalties whose non-compliance was registered in the range.",
    responses={400: {"description": "Invalid date range."}},
)
def penalties(
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> list[PenaltyReportRow]:
    return report_service.get_penalties(db, date_from, date_to)


# ---------------------------------------------------------------------------
# GET /reports/{report}/export
# ---------------------------------------------------------------------------


@router.get(
    "/reports/{report}/export",
    summary="Export a report to Excel (.xlsx)",
    description=(
        "Generates a workbook with a title block, summary figures and the "
        "report table. Valid reports: due-deliverables, contract-status, "
        "deliveries-by-supplier, deliveries-by-orgunit, penalties."
    ),
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Workbook generated.",
            "content": {_XLSX_MEDIA_TYPE: {}},
        },
        400: {"description": "Unknown report or invalid date range."},
        500: {"description": "Workbook generation failed."},
    },
)
def export_report(
    report: Annotated[str, Path(description="Report name, e.g. `penalties`.")],
    db: Annotated[Session, Depends(get_db)],
    date_from: DateFrom = None,
    date_to: DateTo = None,
) -> StreamingResponse:
    """Generate and stream an Excel file for one report.

    Args:
        report: Report name.
        db: Database session.
        date_from: Optional first day of the range.
        date_to: Optional last day of the range.

    Returns:
        A ``StreamingResponse`` with the ``.xlsx`` file attached.

    Raises:
        HTTPException 400: If the report is unknown or the range is invalid.
        HTTPException 500: If workbook generation fails unexpectedly.
    """
    report_key = report.lower()
    logger.info("GET /reports/%s/export from=%s to=%s", report_key, date_from, date_to)

    try:
        file_bytes = export_service.export_excel(db, report_key, date_from, date_to)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("export_report failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generating the Excel file: {exc}",
        ) from exc

    filename = _make_filename(report_key)
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Content-Length": str(len(file_bytes)),
    }
    return StreamingResponse(io.BytesIO(file_bytes), media_type=_XLSX_MEDIA_TYPE, headers=headers)
