"""Row contract shared by all tabular readers.

Every reader in carereport/readers/ returns the rows of a residents or
evaluations export as a list of plain dicts keyed by the header strings of
the source file, in file order.  Downstream code (the record merger) only
sees these dicts and must not know which reader produced them.

Cell contract
-------------
- Spreadsheet cells keep their native type: ``datetime`` for date cells,
  ``int`` / ``float`` for numbers, ``str`` for text.
- CSV cells are always ``str``.
- Empty cells are ``None`` (spreadsheets) or ``""`` (CSV).
- Rows where every cell is empty are dropped.

Failure contract
----------------
A file that cannot be decoded raises ``IngestionError`` with the underlying
exception chained as ``__cause__``.  Readers never retry or return partial
results.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

Row = dict[str, Any]


class IngestionError(Exception):
    """Raised when a source file cannot be decoded into rows."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path.name!r}: {reason}")


class BaseReader:
    """Base class for all tabular readers.

    Subclasses must override read() to return a list of row dicts.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> list[Row]:
        """Return one dict per data row of the source file."""
        raise NotImplementedError(
            f"{type(self).__name__}.read() is not yet implemented"
        )


def is_blank_row(row: Row) -> bool:
    """Return True if every value of *row* is None or whitespace."""
    for value in row.values():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True
