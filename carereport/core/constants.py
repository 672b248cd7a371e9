"""Source column headers and user-facing messages.

Both exports come out of the facility's care software with stable French
headers.  Residents and evaluations share the ``Résident`` column, which is
the only attribute used to link the two files.
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Residents export
# ---------------------------------------------------------------------------

RESIDENT_NAME_COLUMN: str = "Résident"
ROOM_COLUMN: str = "N° de chambre"
AGE_COLUMN: str = "Âge"
BIRTH_DATE_COLUMN: str = "Date naissance"
LAST_ADMISSION_COLUMN: str = "Dernière entrée"
GIR_COLUMN: str = "GIR"

#: Resident columns in report order.
RESIDENT_COLUMNS: tuple[str, ...] = (
    RESIDENT_NAME_COLUMN,
    ROOM_COLUMN,
    AGE_COLUMN,
    BIRTH_DATE_COLUMN,
    LAST_ADMISSION_COLUMN,
    GIR_COLUMN,
)

# ---------------------------------------------------------------------------
# Evaluations export
# ---------------------------------------------------------------------------

EVALUATION_DATE_COLUMN: str = "Date"
EVALUATION_TYPE_COLUMN: str = "Type"
EVALUATION_RESULT_COLUMN: str = "Résultat"

EVALUATION_COLUMNS: tuple[str, ...] = (
    RESIDENT_NAME_COLUMN,
    EVALUATION_DATE_COLUMN,
    EVALUATION_TYPE_COLUMN,
    EVALUATION_RESULT_COLUMN,
)

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

MISSING_FILES_MESSAGE: str = "Veuillez charger les deux fichiers valides."
UNREADABLE_FILE_MESSAGE: str = "Impossible de lire le fichier {name!r}."
