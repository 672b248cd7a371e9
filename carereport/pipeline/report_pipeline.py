"""Report pipeline: load both exports, validate, merge.

Stage order
-----------
1. Load   : residents and evaluations files through ``get_reader``
2. Validate: both files must be given; a file with no data rows still merges
3. Merge  : ``RecordMerger`` with the configured duplicate policy

Each call is independent: nothing is cached between runs.
"""
from __future__ import annotations

import logging
from pathlib import Path

from carereport.core.settings import get_settings
from carereport.merge.record_merger import (
    DuplicatePolicy,
    InputValidationError,
    MergeReport,
    RecordMerger,
)
from carereport.readers.base import Row
from carereport.readers.registry import get_reader

logger = logging.getLogger(__name__)


def load_rows(path: str | Path | None) -> list[Row] | None:
    """Return the rows of *path*, or ``None`` when no path is given.

    Raises IngestionError when the file cannot be decoded and ValueError
    when its extension is not supported.
    """
    if path is None:
        return None
    return get_reader(path).read()


def generate_report(
    residents_path: str | Path | None,
    evaluations_path: str | Path | None,
    *,
    policy: DuplicatePolicy | str | None = None,
) -> MergeReport:
    """Load the two exports and return the merged report.

    Raises InputValidationError when a path is missing.  A file with only a
    header row merges as an empty collection; reader errors propagate
    unchanged.
    """
    if residents_path is None or evaluations_path is None:
        raise InputValidationError()

    resident_rows = load_rows(residents_path)
    evaluation_rows = load_rows(evaluations_path)

    if policy is None:
        policy = get_settings().evaluation_duplicate_policy

    logger.info(
        "Merging %d resident row(s) with %d evaluation row(s)",
        len(resident_rows), len(evaluation_rows),
    )
    return RecordMerger(policy=DuplicatePolicy(policy)).run(resident_rows, evaluation_rows)
