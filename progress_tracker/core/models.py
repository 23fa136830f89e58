"""Modèles de données."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union
import pandas as pd


logger = logging.getLogger(__name__)

ALL = "all"
DEFAULT_CLASS_NAME = "Unassigned"
DEFAULT_ASSESSMENT_TYPE = "General"
DEFAULT_TYPE_LABEL = "Fundamentals"

# Libellés affichés pour les types d'évaluation historiques
ASSESSMENT_TYPE_LABELS = {
    "general": "Fundamentals",
    "exam": "Prototyping",
}

# Nom Python -> nom côté API
WIRE_FIELDS = {
    "id": "id",
    "student_id": "studentId",
    "student_name": "studentName",
    "student_email": "studentEmail",
    "class_name": "className",
    "topic": "topic",
    "assessment_type": "assessmentType",
    "score": "score",
    "notes": "notes",
    "recorded_at": "recordedAt",
    "recorded_by": "recordedBy",
}


class Role(str, Enum):
    """Rôles reconnus par le résolveur de périmètre."""
    STUDENT = "student"
    TEACHER = "teacher"


def normalize_assessment_type(raw: Optional[str], labels: Dict[str, str] = None) -> str:
    """Retourne le libellé affiché pour un type d'évaluation brut."""
    labels = ASSESSMENT_TYPE_LABELS if labels is None else labels
    value = (raw or "").strip()
    if not value:
        return DEFAULT_TYPE_LABEL
    return labels.get(value.lower(), raw)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convertit une date ISO (ou datetime) en datetime UTC."""
    if value is None or value == "":
        return None
    # Le stockage renvoie des fractions de seconde de longueur variable (.1, .1234)
    parsed = pd.Timestamp(value if isinstance(value, datetime) else str(value).strip())
    if pd.isna(parsed):
        raise ValueError(f"Date invalide: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.tz_localize("UTC")
    return parsed.to_pydatetime()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _coerce_stored_score(value: Any) -> int:
    # Les scores venant du stockage sont déjà validés
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        logger.warning("Score illisible %r remplacé par 0", value)
        return 0


@dataclass
class ProgressRecord:
    """Relevé de score d'un étudiant sur un thème."""
    student_id: str = ""
    topic: str = ""
    score: int = 0
    id: Optional[Any] = None

    # Champs d'affichage dénormalisés
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    class_name: Optional[str] = None

    assessment_type: Optional[str] = None
    notes: Optional[str] = None

    # Métadonnées
    recorded_at: Optional[datetime] = None
    recorded_by: Optional[str] = None

    @property
    def class_label(self) -> str:
        """Classe affichée ("Unassigned" si absente)."""
        return self.class_name or DEFAULT_CLASS_NAME

    @property
    def type_label(self) -> str:
        """Type d'évaluation normalisé."""
        return normalize_assessment_type(self.assessment_type)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ProgressRecord":
        """
        Construit un relevé depuis un dict API (camelCase) ou une ligne
        de table (snake_case).
        """
        values = {}
        for attr, wire in WIRE_FIELDS.items():
            if wire in payload:
                values[attr] = payload[wire]
            elif attr in payload:
                values[attr] = payload[attr]

        return cls(
            id=values.get("id"),
            student_id=str(values.get("student_id") or ""),
            topic=str(values.get("topic") or ""),
            score=_coerce_stored_score(values.get("score")),
            student_name=_optional_text(values.get("student_name")),
            student_email=_optional_text(values.get("student_email")),
            class_name=_optional_text(values.get("class_name")),
            assessment_type=_optional_text(values.get("assessment_type")),
            notes=_optional_text(values.get("notes")),
            recorded_at=parse_timestamp(values.get("recorded_at")),
            recorded_by=_optional_text(values.get("recorded_by")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Sérialise au format API, sans les champs vides."""
        payload = {}
        for attr, wire in WIRE_FIELDS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            payload[wire] = value
        return payload

    def copy(self, **changes) -> "ProgressRecord":
        """Retourne une copie modifiée du relevé."""
        return replace(self, **changes)


@dataclass(frozen=True)
class AllRecords:
    """Périmètre enseignant : tous les relevés."""

    def describe(self) -> str:
        return "tous les relevés"


@dataclass(frozen=True)
class SingleStudent:
    """Périmètre limité aux relevés d'un étudiant."""
    student_id: str
    # True quand l'étudiant consulte ses propres relevés
    self_scoped: bool = False

    def describe(self) -> str:
        return f"étudiant {self.student_id}"


ScopeDescriptor = Union[AllRecords, SingleStudent]


@dataclass(frozen=True)
class Filters:
    """Filtres actifs ; la sentinelle "all" désactive un filtre."""
    topic: Optional[str] = ALL
    assessment_type: Optional[str] = ALL
    date_bucket: Optional[str] = ALL
    class_name: Optional[str] = ALL

    def active(self) -> Dict[str, str]:
        """Retourne uniquement les filtres réellement appliqués."""
        return {
            name: value
            for name, value in (
                ("topic", self.topic),
                ("assessment_type", self.assessment_type),
                ("date_bucket", self.date_bucket),
                ("class_name", self.class_name),
            )
            if value and value != ALL
        }


@dataclass
class TrackerConfig:
    """Seuils utilisés par les indicateurs de suivi."""
    at_risk_threshold: float = 70.0
    trend_delta: float = 5.0
    date_format: str = "%Y-%m-%d"
    type_labels: Dict[str, str] = field(default_factory=lambda: dict(ASSESSMENT_TYPE_LABELS))

    # Paliers de maîtrise (seuil minimal, libellé), du plus haut au plus bas
    mastery_levels: tuple = (
        (90, "Expert"),
        (75, "Proficient"),
        (60, "Developing"),
    )
    mastery_fallback: str = "Needs Support"
