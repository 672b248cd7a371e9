"""Reader registry: maps file extension to the correct reader class.

Usage
-----
    from carereport.readers.registry import get_reader

    reader = get_reader("/data/residents.xlsx")
    rows = reader.read()

Rules
-----
- Always route file loading through get_reader().
- Never instantiate a reader class directly in pipeline code.
- get_reader() raises ValueError when the file has no extension or an
  extension with no registered reader.
"""
from __future__ import annotations

import importlib
from pathlib import Path

from carereport.readers.base import BaseReader, IngestionError, Row  # noqa: F401 (re-exported)

# Extension → (module_path, class_name) mapping.
# Actual imports are deferred to get_reader() so pandas is only loaded
# when a CSV file is actually read.
_LAZY_REGISTRY: dict[str, tuple[str, str]] = {}

# Extension → eagerly registered reader class (for programmatic register()).
_REGISTRY: dict[str, type[BaseReader]] = {}


def register(extension: str, reader_cls: type[BaseReader]) -> None:
    """Register a reader class for a file extension.

    extension must be a non-empty string without a leading dot, e.g.
    "xlsx".  Raises ValueError for invalid input.
    """
    if not extension or not extension.strip():
        raise ValueError(
            "extension must be a non-empty string without a leading dot (e.g. 'xlsx')"
        )
    _REGISTRY[extension.lower()] = reader_cls


def supported_extensions() -> frozenset[str]:
    """Return every extension (without dot) that has a reader."""
    return frozenset(_REGISTRY) | frozenset(_LAZY_REGISTRY)


def get_reader(path: str | Path) -> BaseReader:
    """Return an instantiated reader for the given file path.

    Raises ValueError when the file has no extension or when no reader is
    registered for it.
    """
    p = Path(path)
    ext = p.suffix.lstrip(".").lower()
    if not ext:
        raise ValueError(
            f"Cannot determine file type: {p.name!r} has no file extension."
        )

    reader_cls = _REGISTRY.get(ext)
    if reader_cls is not None:
        return reader_cls(p)

    lazy_entry = _LAZY_REGISTRY.get(ext)
    if lazy_entry is not None:
        module_path, class_name = lazy_entry
        mod = importlib.import_module(module_path)
        reader_cls = getattr(mod, class_name)
        return reader_cls(p)

    raise ValueError(
        f"Unsupported file type {ext!r} for {p.name!r}. "
        f"Supported: {', '.join(sorted(supported_extensions()))}"
    )


def _register_defaults() -> None:
    """Populate _LAZY_REGISTRY with the built-in readers."""
    _LAZY_REGISTRY["xlsx"] = ("carereport.readers.excel_reader", "ExcelReader")
    _LAZY_REGISTRY["xlsm"] = ("carereport.readers.excel_reader", "ExcelReader")
    _LAZY_REGISTRY["csv"] = ("carereport.readers.csv_reader", "CSVReader")


_register_defaults()
