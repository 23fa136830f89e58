"""Tri et mise en forme tabulaire des relevés."""

import io
from typing import Dict, Iterable, List
import pandas as pd

from progress_tracker.core.errors import ValidationError
from progress_tracker.core.models import WIRE_FIELDS, ProgressRecord, normalize_assessment_type


# Clés de tri acceptées (nom API ou nom Python) -> attribut
SORT_KEYS = {
    **{wire: attr for attr, wire in WIRE_FIELDS.items()},
    **{attr: attr for attr in WIRE_FIELDS},
}
SORT_KEYS.pop("id")
SORT_KEYS.pop("recordedBy")
SORT_KEYS.pop("recorded_by")

CSV_COLUMNS = list(WIRE_FIELDS.values())


def sort_records(
    records: Iterable[ProgressRecord],
    key: str = "recordedAt",
    direction: str = "desc"
) -> List[ProgressRecord]:
    """
    Tri stable pour l'affichage tabulaire.

    Args:
        records: Relevés à trier (non modifiés)
        key: Colonne de tri (ex: "score", "recordedAt", "topic")
        direction: "asc" ou "desc"

    Returns:
        Nouvelle liste triée ; les égalités gardent l'ordre d'origine
    """
    attr = SORT_KEYS.get(key)
    if attr is None:
        raise ValidationError(f"Clé de tri inconnue: {key}")
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Sens de tri inconnu: {direction}")

    def sort_key(record):
        value = getattr(record, attr)
        # Valeurs absentes en tête en tri croissant
        if value is None or value == "":
            return (0,)
        return (1, value)

    return sorted(records, key=sort_key, reverse=(direction == "desc"))


def records_table(records: Iterable[ProgressRecord], type_labels: Dict[str, str] = None) -> pd.DataFrame:
    """
    Tableau d'affichage des relevés.

    Returns:
        DataFrame avec colonnes: Date, Email, Thème, Type, Score, Commentaires
    """
    rows = []
    for record in records:
        rows.append({
            "Date": record.recorded_at.strftime("%Y-%m-%d") if record.recorded_at else "",
            "Email": record.student_email or record.student_id,
            "Thème": record.topic,
            "Type": normalize_assessment_type(record.assessment_type, type_labels),
            "Score": record.score,
            "Commentaires": record.notes or "",
        })
    return pd.DataFrame(rows, columns=["Date", "Email", "Thème", "Type", "Score", "Commentaires"])


def records_to_csv(records: Iterable[ProgressRecord]) -> bytes:
    """Exporte les relevés en CSV (séparateur ;) relisible par CSVLoader."""
    df = pd.DataFrame([r.to_dict() for r in records], columns=CSV_COLUMNS)
    buffer = io.StringIO()
    df.to_csv(buffer, sep=';', index=False)
    return buffer.getvalue().encode('utf-8')
