"""Evaluation result normalizer.

Reduces a ``Résultat`` cell to the score it carries:

* ``"5 / 30"``  → ``"5"``   (score out of total)
* ``"24 pts"``  → ``"24"``  (trailing unit)
* ``25`` / ``25.0`` → ``"25"`` (numeric spreadsheet cell)
* ``"Non évaluable"`` → ``"Non évaluable"`` (free text, no separator)

Never raises.
"""
from __future__ import annotations

import re
from typing import Any

_SEPARATOR: str = "/"

# A number followed by a unit word, e.g. "24 pts" or "3,5 points".
_NUMBER_WITH_UNIT_RE = re.compile(r"^(-?\d+(?:[.,]\d+)?)\s+\D.*$")


def _to_text(raw: Any) -> str:
    if isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return raw if isinstance(raw, str) else str(raw)


def extract_result(raw: Any) -> str:
    """Return the leading score token of a raw evaluation result.

    The text is split on ``/`` and the first non-empty trimmed segment is
    kept verbatim, except that a unit word following a number is dropped.
    Returns ``""`` for ``None`` and blank input.
    """
    if raw is None:
        return ""

    text = _to_text(raw).strip()
    if not text:
        return ""

    segment = next(
        (part.strip() for part in text.split(_SEPARATOR) if part.strip()),
        "",
    )

    match = _NUMBER_WITH_UNIT_RE.match(segment)
    if match:
        return match.group(1)
    return segment
