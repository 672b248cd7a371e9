"""Normalization package.

One normalizer per loosely formatted source cell.  Each takes the raw cell
value and returns a canonical form:

* ``name_normalizer.normalize_name``    : resident name → join key
* ``result_normalizer.extract_result``  : evaluation result → score
* ``date_formatter.format_date``        : date value → ``DD/MM/YYYY``
* ``date_formatter.parse_evaluation_date``: evaluation date cell → datetime

None of them raise on malformed input.
"""
