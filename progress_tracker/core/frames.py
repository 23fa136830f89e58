"""Conversion des relevés en DataFrame pour les agrégations."""

from typing import Dict, Iterable
import pandas as pd

from progress_tracker.core.models import ProgressRecord, normalize_assessment_type


FRAME_COLUMNS = [
    "id",
    "student_id",
    "student_name",
    "student_email",
    "class_name",
    "topic",
    "assessment_type",
    "type_label",
    "score",
    "notes",
    "recorded_at",
]


def records_to_frame(records: Iterable[ProgressRecord], type_labels: Dict[str, str] = None) -> pd.DataFrame:
    """
    Construit un DataFrame (une ligne par relevé, ordre conservé).

    Les valeurs par défaut d'affichage sont appliquées ici : classe
    "Unassigned", thème "Unknown", type normalisé.
    """
    rows = []
    for record in records:
        rows.append({
            "id": record.id,
            "student_id": record.student_id,
            "student_name": record.student_name,
            "student_email": record.student_email,
            "class_name": record.class_label,
            "topic": record.topic or "Unknown",
            "assessment_type": record.assessment_type,
            "type_label": normalize_assessment_type(record.assessment_type, type_labels),
            "score": int(record.score),
            "notes": record.notes,
            "recorded_at": record.recorded_at,
        })

    if not rows:
        df = pd.DataFrame(columns=FRAME_COLUMNS)
        df["score"] = df["score"].astype("int64")
        df["recorded_at"] = pd.to_datetime(df["recorded_at"], utc=True)
        return df

    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["recorded_at"] = pd.to_datetime(df["recorded_at"], utc=True)
    return df
