"""Resident name normalizer.

Turns the free-text ``Résident`` cell of either export into the canonical
join key ``"SURNAME Given"`` used by the record merger.

The care software writes names as::

    <civility> <SURNAME…> <Given…> [Née <MAIDEN…> <Given…>] (<H|F>) [<NIR> [NIR]]

e.g. ``"Mme. LEFEBVRE Marie Née DUBOIS Claire (F)"`` or
``"M. PETIT Pierre (H) 123456789012345 [NIR]"``.  Cells are sometimes
quoted, wrapped over several lines, or padded with spaces.

Rules applied in order
----------------------
Cleanup rules (``str -> str``):

1. ``strip_quotes``        : remove every double-quote character.
2. ``collapse_whitespace`` : collapse whitespace runs (line breaks
   included) into one space and trim.
3. ``strip_nir_block``     : remove a trailing 15-digit NIR + ``[NIR]`` tag.
4. ``strip_gender_marker`` : remove a trailing ``(H)`` / ``(F)``.
5. ``drop_maiden_keyword`` : delete the word ``Née`` but keep the maiden
   name that follows it.
6. ``strip_civility``      : remove leading ``M.`` / ``Mme`` / ``Madame`` …

The cleanup rules are repeated until the text stops changing, so stacked
markers such as ``(H) (F)`` are all removed.

Resolvers (``str -> str | None``, first non-None wins):

7. ``keep_if_well_formed`` : already ``SURNAME Given`` shaped: keep as is.
8. ``last_token``          : otherwise keep only the final word.

Output of the cascade is itself well-formed or a single word, so
normalizing a key a second time returns it unchanged.

Safety rule: raw values are never logged.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_QUOTE_CHARS: str = "\"“”«»"

# 15 digits, or 13 digits + space + 2-digit key, then the bracketed tag.
_NIR_BLOCK_RE = re.compile(
    r"\s*\b(?:\d{15}|\d{13}\s\d{2})\s*\[\s*NIR\s*\]\s*$",
    re.IGNORECASE,
)

_GENDER_MARKER_RE = re.compile(r"(?:^|\s+)\(\s*[HF]\s*\)\s*$", re.IGNORECASE)

# Whole word only; the maiden name after it is kept.
_MAIDEN_KEYWORD_RE = re.compile(r"(?<!\S)(?:née|nee|né)(?!\S)", re.IGNORECASE)

# Longest alternatives first so "mmes" is not consumed as "mme".
# A bare "M" needs its period, otherwise it is an initial.
_CIVILITY_RE = re.compile(
    r"^(?:(?:"
    r"mademoiselle|madame|monsieur|"
    r"mmes\.?|mme\.?|mlle\.?|mr\.?|"
    r"m\."
    r")\s+)+",
    re.IGNORECASE,
)

_NAME_WORD_PUNCTUATION: frozenset[str] = frozenset("-'’")


# ---------------------------------------------------------------------------
# Cleanup rules
# ---------------------------------------------------------------------------

def strip_quotes(text: str) -> str:
    """Remove double quotes wherever they appear (CSV quoting leftovers)."""
    return "".join(ch for ch in text if ch not in _QUOTE_CHARS)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def strip_nir_block(text: str) -> str:
    """Remove a trailing ``123456789012345 [NIR]`` block."""
    return _NIR_BLOCK_RE.sub("", text).strip()


def strip_gender_marker(text: str) -> str:
    """Remove a trailing ``(H)`` or ``(F)``."""
    return _GENDER_MARKER_RE.sub("", text).strip()


def drop_maiden_keyword(text: str) -> str:
    """Delete the ``Née`` connector, keeping the maiden name tokens."""
    return collapse_whitespace(_MAIDEN_KEYWORD_RE.sub(" ", text))


def strip_civility(text: str) -> str:
    """Remove one or more leading civility tokens."""
    return _CIVILITY_RE.sub("", text).strip()


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------

def _is_name_word(word: str) -> bool:
    return any(ch.isalpha() for ch in word) and all(
        ch.isalpha() or ch in _NAME_WORD_PUNCTUATION for ch in word
    )


def is_well_formed(text: str) -> bool:
    """Return ``True`` if *text* already has the ``SURNAME Given`` shape.

    Conditions that must ALL hold:
    * At least two words.
    * Every word is letters, hyphens and apostrophes only.
    * The first word is fully uppercase (start of the surname).

    An all-caps ``"DUPONT JEAN"`` qualifies: the given name cannot be told
    apart from the surname, so the whole name is kept.
    """
    words = text.split()
    if len(words) < 2:
        return False
    if not all(_is_name_word(w) for w in words):
        return False
    return words[0].isupper()


def keep_if_well_formed(text: str) -> str | None:
    return text if is_well_formed(text) else None


def last_token(text: str) -> str | None:
    """Keep the final word; leading unrecognized words are treated as noise."""
    words = text.split()
    return words[-1] if words else None


# ---------------------------------------------------------------------------
# Rule cascade
# ---------------------------------------------------------------------------

class NameRule(NamedTuple):
    name: str
    apply: Callable[[str], str]


class NameResolver(NamedTuple):
    name: str
    apply: Callable[[str], str | None]


NAME_RULES: tuple[NameRule, ...] = (
    NameRule("strip_quotes", strip_quotes),
    NameRule("collapse_whitespace", collapse_whitespace),
    NameRule("strip_nir_block", strip_nir_block),
    NameRule("strip_gender_marker", strip_gender_marker),
    NameRule("drop_maiden_keyword", drop_maiden_keyword),
    NameRule("strip_civility", strip_civility),
)

NAME_RESOLVERS: tuple[NameResolver, ...] = (
    NameResolver("keep_if_well_formed", keep_if_well_formed),
    NameResolver("last_token", last_token),
)


def _apply_rules(text: str) -> str:
    """Run ``NAME_RULES`` until a full pass leaves *text* unchanged."""
    while True:
        previous = text
        for rule in NAME_RULES:
            text = rule.apply(text)
            if not text:
                return ""
        if text == previous:
            return text


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_name(raw: Any) -> str:
    """Return the canonical join key for a raw resident name cell.

    Parameters
    ----------
    raw:
        Cell value from the ``Résident`` column.  Usually a string; numbers
        are converted with ``str()``.

    Returns
    -------
    str
        ``"SURNAME Given[ MAIDEN Given]"`` for names in the care-software
        shape, the final word for anything else, or ``""`` for ``None`` and
        blank input.
    """
    if raw is None:
        return ""
    text = raw if isinstance(raw, str) else str(raw)
    if not text.strip():
        return ""

    text = _apply_rules(text)
    if not text:
        return ""

    for resolver in NAME_RESOLVERS:
        resolved = resolver.apply(text)
        if resolved is not None:
            if resolver.name != "keep_if_well_formed":
                logger.debug("Name resolved by fallback rule %s", resolver.name)
            return resolved

    return ""
