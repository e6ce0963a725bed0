"""
Excel export helper wrapping xlsxwriter.

Provides ``ExcelExporter`` — a stateful builder that constructs a styled
ContractFlow report workbook in memory and returns its bytes for streaming
via FastAPI's ``StreamingResponse``.

Usage example::

    exporter = ExcelExporter(title="Penalties", filters={"From": "2024-01-01"})
    exporter.add_header()
    exporter.add_summary_row({"Penalties": 3, "Total amount": 1500.0})
    exporter.add_data_table(headers, rows, numeric_cols={10})
    file_bytes = exporter.finalize()

Design notes
------------
- Uses ``xlsxwriter`` in in-memory mode (``BytesIO``).
- Column widths are sized from the longest cell in each column, capped at
  60 characters.
- Numeric columns use the ``#,##0.00`` format and are right-aligned.
- Data rows alternate white and light-grey shading.
"""

from __future__ import annotations

import io
from typing import Any, Sequence

import xlsxwriter

from contractflow.utils.dates import utcnow

_COLOR_PRIMARY = "#1D4ED8"
_COLOR_HEADER_BG = "#1E3A5F"
_COLOR_WHITE = "#FFFFFF"
_COLOR_LIGHT_GREY = "#F3F4F6"
_COLOR_BORDER = "#E5E7EB"

_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8
_MIN_HEADER_COLS = 6

# Excel caps sheet names at 31 characters
_MAX_SHEET_NAME = 31


class ExcelExporter:
    """Stateful Excel workbook builder for report exports.

    Creates a single worksheet with a title block, an optional summary row
    and a styled data table.

    Args:
        title: Report title, e.g. ``"Due deliverables"``.
        filters: Applied filter labels shown under the title,
                 e.g. ``{"From": "2024-01-01", "To": "2024-03-31"}``.
        sheet_name: Name of the worksheet tab (default: ``"Report"``).
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Report",
    ) -> None:
        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook = xlsxwriter.Workbook(self._buffer, {"in_memory": True})
        self._worksheet = self._workbook.add_worksheet(sheet_name[:_MAX_SHEET_NAME])

        self._current_row: int = 0
        self._num_cols: int = 1
        self._formats: dict[str, Any] = self._build_formats()

    # -----------------------------------------------------------------------
    # Format factory
    # -----------------------------------------------------------------------

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        cell = {"font_size": 9, "valign": "vcenter", "border": 1, "border_color": _COLOR_BORDER}

        return {
            "title": wb.add_format({
                "bold": True,
                "font_size": 16,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_PRIMARY,
                "align": "center",
                "valign": "vcenter",
            }),
            "subtitle": wb.add_format({
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_HEADER_BG,
                "align": "center",
                "valign": "vcenter",
            }),
            "filter_key": wb.add_format({
                "bold": True,
                "font_size": 9,
                "bg_color": "#E5E7EB",
                "align": "right",
            }),
            "filter_value": wb.add_format({"font_size": 9, "bg_color": "#F9FAFB"}),
            "summary_label": wb.add_format({
                "bold": True,
                "font_size": 10,
                "bg_color": "#EFF6FF",
                "align": "center",
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "summary_value": wb.add_format({
                "bold": True,
                "font_size": 12,
                "font_color": _COLOR_PRIMARY,
                "bg_color": "#EFF6FF",
                "align": "center",
                "num_format": "#,##0.##",
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "col_header": wb.add_format({
                "bold": True,
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_HEADER_BG,
                "align": "center",
                "valign": "vcenter",
                "border": 1,
                "text_wrap": True,
            }),
            "text": wb.add_format({**cell, "bg_color": _COLOR_WHITE}),
            "text_alt": wb.add_format({**cell, "bg_color": _COLOR_LIGHT_GREY}),
            "number": wb.add_format(
                {**cell, "bg_color": _COLOR_WHITE, "align": "right", "num_format": "#,##0.00"}
            ),
            "number_alt": wb.add_format(
                {**cell, "bg_color": _COLOR_LIGHT_GREY, "align": "right", "num_format": "#,##0.00"}
            ),
        }

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def add_header(self, num_cols: int | None = None) -> "ExcelExporter":
        """Write the title block: title, generation time and filter rows.

        Args:
            num_cols: Number of columns the block spans; defaults to six.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        span = max(num_cols or self._num_cols, _MIN_HEADER_COLS) - 1

        ws.set_row(self._current_row, 32)
        ws.merge_range(
            self._current_row, 0, self._current_row, span,
            f"ContractFlow — {self._title}",
            self._formats["title"],
        )
        self._current_row += 1

        generated = utcnow().strftime("%Y-%m-%d %H:%M UTC")
        ws.merge_range(
            self._current_row, 0, self._current_row, span,
            f"Generated: {generated}",
            self._formats["subtitle"],
        )
        self._current_row += 1

        for key, value in self._filters.items():
            ws.write(self._current_row, 0, key, self._formats["filter_key"])
            ws.merge_range(
                self._current_row, 1, self._current_row, span,
                value,
                self._formats["filter_value"],
            )
            self._current_row += 1

        self._current_row += 1
        return self

    def add_summary_row(self, figures: dict[str, Any]) -> "ExcelExporter":
        """Write labelled summary figures side by side (label above value).

        Args:
            figures: Ordered ``{label: value}`` pairs.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        for col, (label, value) in enumerate(figures.items()):
            ws.write(self._current_row, col, label, self._formats["summary_label"])
            ws.write(self._current_row + 1, col, value, self._formats["summary_value"])

        self._current_row += 3
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        numeric_cols: set[int] | None = None,
    ) -> "ExcelExporter":
        """Write a styled data table with alternating row shading.

        Args:
            headers: Column header strings.
            rows: Data rows, each matching the length of ``headers``.
            numeric_cols: Zero-based indices of numeric columns.  When
                          ``None`` they are detected from the first row.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        self._num_cols = len(headers)

        if numeric_cols is None:
            numeric_cols = {
                ci
                for ci, value in enumerate(rows[0] if rows else ())
                if isinstance(value, (int, float)) and not isinstance(value, bool)
            }

        col_widths = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 20)
        for ci, header in enumerate(headers):
            ws.write(self._current_row, ci, header, self._formats["col_header"])
        self._current_row += 1

        for ri, data_row in enumerate(rows):
            suffix = "_alt" if ri % 2 == 1 else ""
            for ci, value in enumerate(data_row):
                kind = "number" if ci in numeric_cols else "text"
                ws.write(self._current_row, ci, value, self._formats[kind + suffix])
                text = "" if value is None else str(value)
                col_widths[ci] = min(_MAX_COL_WIDTH, max(col_widths[ci], len(text)))
            self._current_row += 1

        for ci, width in enumerate(col_widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        ws.freeze_panes(self._current_row - len(rows), 0)
        return self

    def finalize(self) -> bytes:
        """Close the workbook and return its bytes.

        The exporter must not be reused afterwards.
        """
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
