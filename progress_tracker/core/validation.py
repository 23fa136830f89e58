"""Validation des données soumises avant persistance."""

import logging
from typing import Any, Dict, Union

from progress_tracker.core.errors import ValidationError
from progress_tracker.core.models import (
    DEFAULT_ASSESSMENT_TYPE,
    WIRE_FIELDS,
    ProgressRecord,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100

# Seuls champs transmis lors d'une mise à jour (noms API)
UPDATABLE_FIELDS = ("topic", "assessmentType", "score", "notes", "studentName", "className")


def validate_score(value: Any) -> int:
    """
    Vérifie qu'un score est un entier dans [0, 100].

    Accepte les entiers, les flottants entiers et les chaînes numériques
    (saisie de formulaire).
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Score invalide: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            raise ValidationError(f"Score invalide: {text!r}")
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Le score doit être entier: {value}")
        value = int(value)
    elif not isinstance(value, int):
        raise ValidationError(f"Score invalide: {value!r}")

    if not SCORE_MIN <= value <= SCORE_MAX:
        raise ValidationError(f"Le score doit être compris entre {SCORE_MIN} et {SCORE_MAX}: {value}")
    return value


def require_text(value: Any, name: str) -> str:
    """Vérifie qu'un champ texte obligatoire est renseigné."""
    if value is None or not str(value).strip():
        raise ValidationError(f"Champ obligatoire manquant: {name}")
    return str(value).strip()


def validate_new_record(record: Union[ProgressRecord, Dict[str, Any]]) -> ProgressRecord:
    """
    Valide un relevé à créer et applique les valeurs par défaut.

    Returns:
        Copie du relevé prête à être envoyée (sans id ni recordedBy)
    """
    if isinstance(record, dict):
        raw_score = record.get("score")
        raw_recorded_at = record.get("recordedAt", record.get("recorded_at"))
        try:
            recorded_at = parse_timestamp(raw_recorded_at)
        except ValueError:
            raise ValidationError(f"Date invalide: {raw_recorded_at!r}")
        record = ProgressRecord.from_dict({**record, "score": 0, "recordedAt": None})
        record.recorded_at = recorded_at
    else:
        raw_score = record.score

    assessment_type = (record.assessment_type or "").strip() or DEFAULT_ASSESSMENT_TYPE

    return record.copy(
        id=None,
        recorded_by=None,
        student_id=require_text(record.student_id, "studentId"),
        topic=require_text(record.topic, "topic"),
        score=validate_score(raw_score),
        assessment_type=assessment_type,
    )


def sanitize_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Ne conserve que les champs modifiables et valide leurs valeurs.

    Les autres champs (id, studentId, recordedAt, ...) sont ignorés
    silencieusement.
    """
    clean: Dict[str, Any] = {}
    for key, value in (fields or {}).items():
        wire = WIRE_FIELDS.get(key, key)
        if wire not in UPDATABLE_FIELDS:
            logger.debug("Champ ignoré dans la mise à jour: %s", key)
            continue
        clean[wire] = value

    if "score" in clean:
        clean["score"] = validate_score(clean["score"])
    if "topic" in clean:
        clean["topic"] = require_text(clean["topic"], "topic")
    return clean
