"""Record merger.

Joins evaluation rows onto resident rows through the canonical name key
produced by ``normalize_name``.

Algorithm
---------
1. Both inputs must be present; ``None`` raises ``InputValidationError``
   before any row is looked at.
2. Every resident row is keyed by its normalized ``Résident`` cell.  A
   resident key seen again overwrites the stored fields (last row wins)
   but keeps the evaluations already attached.
3. Every evaluation row is keyed the same way.  Rows whose key has no
   resident are dropped silently and reported only through
   ``MergeReport.unmatched_keys``.
4. The ``Résultat`` cell is reduced with ``extract_result`` and stored
   under the ``Type`` code.  For a repeated (resident, type) pair the
   ``DuplicatePolicy`` decides which row survives; the default keeps the
   last row in input order.
5. Residents come out in first-seen order.

The merger holds no state between calls; every call builds its own maps.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from carereport.core.constants import (
    EVALUATION_DATE_COLUMN,
    EVALUATION_RESULT_COLUMN,
    EVALUATION_TYPE_COLUMN,
    MISSING_FILES_MESSAGE,
    RESIDENT_NAME_COLUMN,
)
from carereport.normalization.date_formatter import parse_evaluation_date
from carereport.normalization.name_normalizer import normalize_name
from carereport.normalization.result_normalizer import extract_result

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    """Raised when the residents or the evaluations collection is missing."""

    def __init__(self, message: str = MISSING_FILES_MESSAGE) -> None:
        super().__init__(message)


class DuplicatePolicy(str, Enum):
    """Which evaluation survives when a resident has the same type twice."""

    LAST_ROW = "last_row"
    LATEST_DATE = "latest_date"


# ---------------------------------------------------------------------------
# Output dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EvaluationRecord:
    """One retained evaluation of a resident."""

    evaluation_type: str
    result: str
    raw_result: Any = None
    raw_date: Any = None
    date: datetime | None = None


@dataclass(frozen=True)
class MergedResident:
    """A resident row with its evaluations attached, keyed by type code."""

    key: str
    fields: Mapping[str, Any]
    evaluations: Mapping[str, EvaluationRecord]

    def __getitem__(self, column: str) -> Any:
        return self.fields[column]

    def get(self, column: str, default: Any = None) -> Any:
        return self.fields.get(column, default)


@dataclass(frozen=True)
class MergeReport:
    """Merged residents plus diagnostics about what was left out."""

    residents: list[MergedResident] = field(default_factory=list)
    unmatched_keys: list[str] = field(default_factory=list)
    skipped_rows: int = 0
    evaluation_types: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Merger
# ---------------------------------------------------------------------------

@dataclass
class _Scaffold:
    fields: dict[str, Any]
    evaluations: dict[str, EvaluationRecord] = field(default_factory=dict)


def _is_newer(candidate: EvaluationRecord, current: EvaluationRecord) -> bool:
    """LATEST_DATE rule: unknown dates and ties fall back to last row wins."""
    if candidate.date is None or current.date is None:
        return True
    return candidate.date >= current.date


class RecordMerger:
    """Merge resident rows and evaluation rows into ``MergedResident`` records.

    Usage::

        report = RecordMerger().run(resident_rows, evaluation_rows)
        for resident in report.residents:
            resident["N° de chambre"], resident.evaluations["MMSE"].result
    """

    def __init__(
        self,
        *,
        policy: DuplicatePolicy = DuplicatePolicy.LAST_ROW,
        name_column: str = RESIDENT_NAME_COLUMN,
        date_column: str = EVALUATION_DATE_COLUMN,
        type_column: str = EVALUATION_TYPE_COLUMN,
        result_column: str = EVALUATION_RESULT_COLUMN,
    ) -> None:
        self.policy = DuplicatePolicy(policy)
        self.name_column = name_column
        self.date_column = date_column
        self.type_column = type_column
        self.result_column = result_column

    def run(
        self,
        resident_rows: Iterable[Mapping[str, Any]] | None,
        evaluation_rows: Iterable[Mapping[str, Any]] | None,
    ) -> MergeReport:
        """Return the merged residents with diagnostics.

        Raises InputValidationError when either collection is ``None``.
        """
        if resident_rows is None or evaluation_rows is None:
            raise InputValidationError()

        scaffolds: dict[str, _Scaffold] = {}
        skipped = 0

        for row in resident_rows:
            key = normalize_name(row.get(self.name_column))
            if not key:
                skipped += 1
                continue
            existing = scaffolds.get(key)
            if existing is None:
                scaffolds[key] = _Scaffold(fields=dict(row))
            else:
                existing.fields = dict(row)

        unmatched: dict[str, None] = {}
        types_seen: dict[str, None] = {}

        for row in evaluation_rows:
            key = normalize_name(row.get(self.name_column))
            evaluation_type = self._evaluation_type(row)
            if not key or not evaluation_type:
                skipped += 1
                continue

            scaffold = scaffolds.get(key)
            if scaffold is None:
                unmatched.setdefault(key, None)
                continue

            raw_date = row.get(self.date_column)
            raw_result = row.get(self.result_column)
            record = EvaluationRecord(
                evaluation_type=evaluation_type,
                result=extract_result(raw_result),
                raw_result=raw_result,
                raw_date=raw_date,
                date=parse_evaluation_date(raw_date),
            )

            current = scaffold.evaluations.get(evaluation_type)
            if (
                current is None
                or self.policy is DuplicatePolicy.LAST_ROW
                or _is_newer(record, current)
            ):
                scaffold.evaluations[evaluation_type] = record
            types_seen.setdefault(evaluation_type, None)

        residents = [
            MergedResident(
                key=key,
                fields=MappingProxyType(scaffold.fields),
                evaluations=MappingProxyType(scaffold.evaluations),
            )
            for key, scaffold in scaffolds.items()
        ]

        logger.info(
            "Merged %d resident(s); %d unmatched evaluation key(s), %d skipped row(s)",
            len(residents), len(unmatched), skipped,
        )
        return MergeReport(
            residents=residents,
            unmatched_keys=list(unmatched),
            skipped_rows=skipped,
            evaluation_types=list(types_seen),
        )

    def _evaluation_type(self, row: Mapping[str, Any]) -> str:
        value = row.get(self.type_column)
        if value is None:
            return ""
        return " ".join(str(value).split())


def merge(
    resident_rows: Iterable[Mapping[str, Any]] | None,
    evaluation_rows: Iterable[Mapping[str, Any]] | None,
) -> list[MergedResident]:
    """Merge with the default policy and return only the residents."""
    return RecordMerger().run(resident_rows, evaluation_rows).residents
