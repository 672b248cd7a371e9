"""Report assembly for merged residents.

Flattens ``MergedResident`` records into a display table: one row per
resident, the resident columns first, then a result column and a date
column per evaluation type.  Dates go through ``format_date`` so every
date column reads ``DD/MM/YYYY``.

Pure logic is separated from IO: ``build_report_table`` and
``build_csv_content`` only touch in-memory data; ``build_xlsx_bytes``
renders the same table with openpyxl.
"""
from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

from carereport.core.constants import RESIDENT_COLUMNS
from carereport.merge.record_merger import EvaluationRecord, MergedResident
from carereport.normalization.date_formatter import format_date

logger = logging.getLogger(__name__)

#: Suffix of the per-type evaluation date column.
DATE_COLUMN_SUFFIX: str = " (date)"

SHEET_TITLE: str = "Synthèse"


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def _display(value: Any) -> Any:
    """Return a cell value ready for display.

    Dates become ``DD/MM/YYYY``, ``None`` becomes ``""``, integral floats
    lose their ``.0``; anything else is returned as is.
    """
    value = format_date(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _evaluation_date(record: EvaluationRecord) -> Any:
    if record.date is not None:
        return format_date(record.date)
    return _display(record.raw_date)


def collect_evaluation_types(residents: Iterable[MergedResident]) -> list[str]:
    """Return every evaluation type present, in first-seen order."""
    seen: dict[str, None] = {}
    for resident in residents:
        for evaluation_type in resident.evaluations:
            seen.setdefault(evaluation_type, None)
    return list(seen)


def resident_to_dict(resident: MergedResident) -> dict[str, Any]:
    """Return a JSON-ready projection of one merged resident."""
    return {
        "key": resident.key,
        "fields": {column: _display(value) for column, value in resident.fields.items()},
        "evaluations": {
            evaluation_type: {
                "result": record.result,
                "date": _evaluation_date(record),
            }
            for evaluation_type, record in resident.evaluations.items()
        },
    }


def build_report_table(
    residents: Sequence[MergedResident],
    evaluation_types: Sequence[str] | None = None,
    resident_columns: Sequence[str] = RESIDENT_COLUMNS,
) -> tuple[list[str], list[list[Any]]]:
    """Return ``(columns, rows)`` for the merged residents.

    *evaluation_types* fixes the order of the evaluation columns; by default
    every type present is used in first-seen order.  Missing values are
    rendered as ``""``.
    """
    if evaluation_types is None:
        evaluation_types = collect_evaluation_types(residents)

    columns: list[str] = list(resident_columns)
    for evaluation_type in evaluation_types:
        columns.append(evaluation_type)
        columns.append(f"{evaluation_type}{DATE_COLUMN_SUFFIX}")

    rows: list[list[Any]] = []
    for resident in residents:
        row = [_display(resident.get(column)) for column in resident_columns]
        for evaluation_type in evaluation_types:
            record = resident.evaluations.get(evaluation_type)
            if record is None:
                row.extend(["", ""])
            else:
                row.extend([record.result, _evaluation_date(record)])
        rows.append(row)

    return columns, rows


def build_csv_content(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Build CSV content as a string.  Pure function: no IO.

    Uses ";" as delimiter so the file opens directly in a French Excel.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=";")
    writer.writerow(columns)
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buf.getvalue()


def build_xlsx_bytes(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> bytes:
    """Render the table as an .xlsx workbook and return its bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(list(columns))
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append(list(row))
    ws.freeze_panes = "A2"

    buf = io.BytesIO()
    wb.save(buf)
    logger.info("Rendered report workbook with %d row(s)", len(rows))
    return buf.getvalue()
