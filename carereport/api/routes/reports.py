"""Report routes: upload the two exports, get the merged report back.

POST /reports        : merged residents as JSON
POST /reports/export : the same report as a CSV or XLSX download

Both routes take a multipart form with a ``residents`` and an
``evaluations`` file.  Uploads are written to a per-request directory under
``UPLOAD_DIR`` and removed once the report is built.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Literal
from uuid import uuid4

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from carereport.core.constants import MISSING_FILES_MESSAGE, UNREADABLE_FILE_MESSAGE
from carereport.core.settings import get_settings
from carereport.merge.record_merger import InputValidationError, MergeReport
from carereport.pipeline.report_pipeline import generate_report
from carereport.readers.base import IngestionError
from carereport.readers.registry import supported_extensions
from carereport.report.assembler import (
    build_csv_content,
    build_report_table,
    build_xlsx_bytes,
    resident_to_dict,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ---------------------------------------------------------------------------
# Upload helpers
# ---------------------------------------------------------------------------

def _is_supported(filename: str) -> bool:
    """Return True if the file extension has a reader."""
    return Path(filename).suffix.lstrip(".").lower() in supported_extensions()


async def _save_upload(upload: UploadFile | None, directory: Path, slot: str) -> Path | None:
    """Write *upload* under *directory*; return None for a missing or empty file."""
    if upload is None or not upload.filename:
        return None

    filename = Path(upload.filename).name
    if not _is_supported(filename):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file {filename!r}. Supported: "
                   + ", ".join(f".{ext}" for ext in sorted(supported_extensions())),
        )

    settings = get_settings()
    content = await upload.read()
    if not content:
        return None
    if len(content) > settings.upload_max_file_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File {filename!r} exceeds {settings.upload_max_file_size_mb}MB limit",
        )

    dest = directory / f"{slot}{Path(filename).suffix.lower()}"
    dest.write_bytes(content)
    return dest


async def _build_report(
    residents: UploadFile | None,
    evaluations: UploadFile | None,
) -> MergeReport:
    """Save both uploads, run the pipeline, clean up, map errors to HTTP."""
    if residents is None or evaluations is None:
        raise HTTPException(status_code=400, detail=MISSING_FILES_MESSAGE)

    upload_path = Path(get_settings().upload_dir) / str(uuid4())
    upload_path.mkdir(parents=True, exist_ok=True)
    try:
        residents_path = await _save_upload(residents, upload_path, "residents")
        evaluations_path = await _save_upload(evaluations, upload_path, "evaluations")
        return generate_report(residents_path, evaluations_path)
    except InputValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except IngestionError as exc:
        logger.warning("Upload could not be decoded: %s", exc.reason)
        slot_names = {"residents": residents.filename, "evaluations": evaluations.filename}
        name = slot_names.get(exc.path.stem, exc.path.name)
        raise HTTPException(
            status_code=422,
            detail=UNREADABLE_FILE_MESSAGE.format(name=name),
        ) from exc
    finally:
        shutil.rmtree(upload_path, ignore_errors=True)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("", summary="Merge a residents export with an evaluations export")
async def create_report(
    residents: UploadFile | None = File(None),
    evaluations: UploadFile | None = File(None),
):
    report = await _build_report(residents, evaluations)
    return {
        "resident_count": len(report.residents),
        "evaluation_types": report.evaluation_types,
        "unmatched_count": len(report.unmatched_keys),
        "skipped_rows": report.skipped_rows,
        "residents": [resident_to_dict(r) for r in report.residents],
    }


@router.post("/export", summary="Download the merged report as CSV or XLSX")
async def export_report(
    residents: UploadFile | None = File(None),
    evaluations: UploadFile | None = File(None),
    format: Literal["csv", "xlsx"] = Query("csv"),
):
    report = await _build_report(residents, evaluations)
    columns, rows = build_report_table(report.residents, report.evaluation_types)

    if format == "xlsx":
        return Response(
            content=build_xlsx_bytes(columns, rows),
            media_type=_XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="synthese.xlsx"'},
        )

    # BOM so Excel picks up UTF-8 accents
    content = "\ufeff" + build_csv_content(columns, rows)
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="synthese.csv"'},
    )
