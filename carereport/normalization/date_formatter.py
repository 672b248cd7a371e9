"""Date display and evaluation-date parsing.

``format_date`` is the display helper used for every date column of the
report: real date values become ``DD/MM/YYYY``, ``None`` becomes ``""`` and
anything else is handed back untouched.  Callers must not assume a string
result for non-date input.

``parse_evaluation_date`` reads the ``Date`` cell of the evaluations export,
written by the care software as ``"01/01/2023 à 10:00"``.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

# Tried in order after the " à " separator has been replaced by a space.
_EVALUATION_DATE_FORMATS: list[str] = [
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
]

_AT_SEPARATOR_RE = re.compile(r"\s+à\s+", re.IGNORECASE)


def format_date(value: Any) -> Any:
    """Return *value* as ``DD/MM/YYYY`` when it is a date.

    ``datetime``, ``date`` and ``pandas.Timestamp`` values are formatted
    with a zero-padded day and month.  ``None`` and ``NaT`` give ``""``.
    Every other value, strings included, is returned unchanged.  Never raises.
    """
    if value is None:
        return ""
    if isinstance(value, date):
        # NaT is a datetime subclass that is not equal to itself
        if value != value:
            return ""
        return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"
    return value


def parse_evaluation_date(raw: Any) -> datetime | None:
    """Return the evaluation timestamp carried by a ``Date`` cell.

    Returns ``None`` for blank or unrecognised input.  Never raises.
    """
    if raw is None or raw != raw:
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if not isinstance(raw, str) or not raw.strip():
        return None

    text = _AT_SEPARATOR_RE.sub(" ", " ".join(raw.split()))
    for fmt in _EVALUATION_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
