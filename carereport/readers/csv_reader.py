"""CSV reader: pandas chunksize streaming.

Rules
-----
- Never call pd.read_csv() on the full file: always use the chunksize
  iterator so large exports are processed without loading them entirely
  into memory.
- Row 0 is the header row; header strings become the dict keys.
- Every cell is read as ``str`` (dtype=str, keep_default_na=False) so room
  numbers such as "012" keep their leading zero.
- The delimiter is sniffed: French exports use ";" while others use ",".
- A UTF-8 byte-order mark is stripped from the first header.
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from carereport.readers.base import BaseReader, IngestionError, Row, is_blank_row

logger = logging.getLogger(__name__)

CHUNK_SIZE: int = 1_000  # rows per pandas iterator chunk
ENCODING: str = "utf-8-sig"


class CSVReader(BaseReader):
    """Stream a CSV file in chunks and return row dicts."""

    def __init__(self, path: str | Path, delimiter: str | None = None) -> None:
        super().__init__(path)
        self.delimiter = delimiter

    def read(self) -> list[Row]:
        """Return one dict per non-blank data row.

        Raises IngestionError when the file cannot be opened, decoded or
        tokenized.
        """
        rows: list[Row] = []
        try:
            # the delimiter sniffer cannot cope with an empty file
            if self.path.stat().st_size == 0:
                return []
            for chunk in pd.read_csv(
                str(self.path),
                sep=self.delimiter,
                engine="python",
                chunksize=CHUNK_SIZE,
                dtype=str,
                keep_default_na=False,
                encoding=ENCODING,
            ):
                for record in chunk.to_dict(orient="records"):
                    row: Row = {str(k).strip(): v for k, v in record.items()}
                    if is_blank_row(row):
                        continue
                    rows.append(row)
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, csv.Error, UnicodeDecodeError, OSError) as exc:
            raise IngestionError(self.path, str(exc) or type(exc).__name__) from exc

        logger.info("Read %d row(s) from %s", len(rows), self.path.name)
        return rows
