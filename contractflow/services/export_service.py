"""
Report export service layer.

Turns any report of ``report_service`` into an ``.xlsx`` workbook.  The
report rows are fetched through the same functions that serve the JSON
endpoints, so an export always matches what the dashboard shows for the
same range.

Supported reports
-----------------
- ``"due-deliverables"``       — Undelivered deliverables with due status.
- ``"contract-status"``        — Obligation progress per contract.
- ``"deliveries-by-supplier"`` — Punctuality per supplier.
- ``"deliveries-by-orgunit"``  — Punctuality per org unit.
- ``"penalties"``              — Applied penalties.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from contractflow.exporters.excel_exporter import ExcelExporter
from contractflow.services import report_service
from contractflow.utils.constants import REPORT_NAMES

logger = logging.getLogger(__name__)


def _fmt_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else ""


# ---------------------------------------------------------------------------
# Report dispatch helper
# ---------------------------------------------------------------------------


def _get_export_data(
    db: Session,
    report: str,
    date_from: date | None,
    date_to: date | None,
    now: datetime | None,
) -> tuple[str, list[str], list[list[Any]], dict[str, Any], set[int]]:
    """Fetch a report and shape it as a table.

    Returns:
        ``(title, headers, rows, summary, numeric_cols)``.
    """
    if report == "due-deliverables":
        data = report_service.get_due_deliverables(db, date_from, date_to, now=now)
        rows = [
            [r.contract_number, r.obligation_description, _fmt_date(r.expected_date),
             r.quantity, r.unit, r.status]
            for r in data
        ]
        overdue = sum(1 for r in data if r.status == "overdue")
        return (
            "Due deliverables",
            ["Contract", "Obligation", "Expected date", "Quantity", "Unit", "Status"],
            rows,
            {"Deliverables": len(data), "Overdue": overdue},
            {3},
        )

    if report == "contract-status":
        data = report_service.get_contract_status(db, date_from, date_to)
        rows = [
            [r.official_number, r.status.value, r.total_obligations, r.completed_obligations]
            for r in data
        ]
        return (
            "Contract status",
            ["Contract", "Status", "Obligations", "Completed"],
            rows,
            {"Contracts": len(data)},
            {2, 3},
        )

    if report in ("deliveries-by-supplier", "deliveries-by-orgunit"):
        if report == "deliveries-by-supplier":
            data = report_service.get_deliveries_by_supplier(db, date_from, date_to, now=now)
            title, label = "Deliveries by supplier", "Supplier"
            rows = [
                [r.supplier_name, r.total_deliveries, r.on_time_deliveries, r.late_deliveries]
                for r in data
            ]
        else:
            data = report_service.get_deliveries_by_org_unit(db, date_from, date_to, now=now)
            title, label = "Deliveries by org unit", "Org unit"
            rows = [
                [r.org_unit_name, r.total_deliveries, r.on_time_deliveries, r.late_deliveries]
                for r in data
            ]
        return (
            title,
            [label, "Total", "On time", "Late"],
            rows,
            {
                "Total": sum(r[1] for r in rows),
                "On time": sum(r[2] for r in rows),
                "Late": sum(r[3] for r in rows),
            },
            {1, 2, 3},
        )

    if report == "penalties":
        data = report_service.get_penalties(db, date_from, date_to)
        rows = [
            [_fmt_date(r.registered_at), r.reason, r.severity, r.severity_level or "",
             r.type, r.legal_basis or "", r.amount]
            for r in data
        ]
        return (
            "Penalties",
            ["Registered", "Reason", "Severity", "Level", "Type", "Legal basis", "Amount"],
            rows,
            {"Penalties": len(data), "Total amount": sum(r.amount or 0.0 for r in data)},
            {6},
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Report '{report}' is not supported. Valid values: {REPORT_NAMES}.",
    )


# ---------------------------------------------------------------------------
# Public export function
# ---------------------------------------------------------------------------


def export_excel(
    db: Session,
    report: str,
    date_from: date | None = None,
    date_to: date | None = None,
    now: datetime | None = None,
) -> bytes:
    """Generate an Excel (.xlsx) export of one report.

    Args:
        db: Active SQLAlchemy session.
        report: Report name (see ``REPORT_NAMES``).
        date_from: Optional first day of the range (inclusive).
        date_to: Optional last day of the range (inclusive).
        now: Evaluation time for status columns.

    Returns:
        Raw bytes of the ``.xlsx`` file.

    Raises:
        HTTPException 400: If the report is unknown or the range is invalid.
    """
    title, headers, rows, summary, numeric_cols = _get_export_data(
        db, report, date_from, date_to, now
    )

    filter_labels: dict[str, str] = {}
    if date_from is not None:
        filter_labels["From"] = date_from.isoformat()
    if date_to is not None:
        filter_labels["To"] = date_to.isoformat()

    exporter = ExcelExporter(title=title, filters=filter_labels, sheet_name=title)
    exporter.add_header(num_cols=len(headers))
    exporter.add_summary_row(summary)
    exporter.add_data_table(headers, rows, numeric_cols=numeric_cols)
    file_bytes = exporter.finalize()

    logger.info(
        "export_excel: report=%s rows=%d bytes=%d", report, len(rows), len(file_bytes)
    )
    return file_bytes
