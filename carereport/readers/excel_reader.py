"""Excel reader: openpyxl streaming, first visible sheet.

Rules
-----
- Always open with read_only=True, data_only=True: never eager load.
- Only the first visible worksheet is read; the care software exports one
  sheet per file.  Hidden and veryHidden sheets are skipped.
- Row 1 is the header row; its values become the dict keys of every row.
- Columns with an empty header are dropped.
- Rows 2+ become one dict each; rows with no value at all are skipped.
- Date cells keep their ``datetime`` value (formatting happens at report time).
"""
from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from carereport.readers.base import BaseReader, IngestionError, Row, is_blank_row

logger = logging.getLogger(__name__)


class ExcelReader(BaseReader):
    """Read the first visible sheet of a workbook into row dicts."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read(self) -> list[Row]:
        """Return the data rows of the first visible sheet.

        Returns an empty list for a workbook whose visible sheets are all
        empty.  Raises IngestionError when the file is not a readable
        workbook.
        """
        try:
            wb = openpyxl.load_workbook(str(self.path), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise IngestionError(self.path, str(exc) or type(exc).__name__) from exc

        try:
            for sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
                if ws.sheet_state != "visible":
                    continue
                rows = self._read_sheet(ws)
                logger.info(
                    "Read %d row(s) from sheet %r of %s",
                    len(rows), sheet_name, self.path.name,
                )
                return rows
        finally:
            wb.close()

        return []

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read_sheet(self, sheet: object) -> list[Row]:
        values = sheet.iter_rows(values_only=True)

        header_row = next(values, None)
        if header_row is None:
            return []

        # Column position → header text; empty headers are dropped
        headers: dict[int, str] = {}
        for idx, value in enumerate(header_row):
            if value is None:
                continue
            header = str(value).strip()
            if header:
                headers[idx] = header

        if not headers:
            return []

        rows: list[Row] = []
        for cells in values:
            row: Row = {
                header: (cells[idx] if idx < len(cells) else None)
                for idx, header in headers.items()
            }
            if is_blank_row(row):
                continue
            rows.append(row)
        return rows
