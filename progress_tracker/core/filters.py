"""Pipeline de filtrage des relevés."""

from typing import Callable, Dict, Iterable, List, Optional
import pandas as pd

from progress_tracker.core.errors import ValidationError
from progress_tracker.core.models import (
    Filters,
    ProgressRecord,
    normalize_assessment_type,
)

Predicate = Callable[[ProgressRecord], bool]


class FilterPipeline:
    """
    Restreint un ensemble de relevés par thème, type, période et classe.

    Chaque filtre actif est un prédicat indépendant : l'ordre
    d'application ne change pas le résultat et l'ordre relatif des
    relevés est conservé.
    """

    # Périodes relatives à l'instant du filtrage
    DATE_BUCKETS = {
        "week": pd.DateOffset(days=7),
        "month": pd.DateOffset(months=1),
        "quarter": pd.DateOffset(months=3),
    }

    def __init__(self, type_labels: Dict[str, str] = None):
        self.type_labels = type_labels

    def _cutoff(self, bucket: str, now: Optional[pd.Timestamp]) -> pd.Timestamp:
        offset = self.DATE_BUCKETS.get(bucket)
        if offset is None:
            raise ValidationError(f"Période inconnue: {bucket}")
        now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
        if now.tzinfo is None:
            now = now.tz_localize("UTC")
        return now - offset

    def predicates(self, filters: Filters, now=None) -> List[Predicate]:
        """Construit la liste des prédicats correspondant aux filtres actifs."""
        active = filters.active() if filters else {}
        preds: List[Predicate] = []

        if "topic" in active:
            topic = active["topic"]
            preds.append(lambda r: r.topic == topic)

        if "assessment_type" in active:
            wanted = active["assessment_type"]
            labels = self.type_labels
            preds.append(
                lambda r: normalize_assessment_type(r.assessment_type, labels) == wanted
                or r.assessment_type == wanted
            )

        if "class_name" in active:
            class_name = active["class_name"]
            preds.append(lambda r: r.class_label == class_name)

        if "date_bucket" in active:
            cutoff = self._cutoff(active["date_bucket"], now)
            preds.append(
                lambda r: r.recorded_at is not None and pd.Timestamp(r.recorded_at) >= cutoff
            )

        return preds

    def apply(
        self,
        records: Iterable[ProgressRecord],
        filters: Optional[Filters] = None,
        now=None
    ) -> List[ProgressRecord]:
        """
        Applique les filtres et retourne une nouvelle liste.

        Args:
            records: Relevés d'entrée (non modifiés)
            filters: Filtres actifs (None = aucun)
            now: Instant de référence pour les périodes (défaut: maintenant)
        """
        preds = self.predicates(filters, now)
        return [r for r in records if all(p(r) for p in preds)]

    def distinct_values(self, records: Iterable[ProgressRecord]) -> Dict[str, List[str]]:
        """Valeurs sélectionnables pour chaque filtre, par ordre d'apparition."""
        topics: Dict[str, None] = {}
        types: Dict[str, None] = {}
        classes: Dict[str, None] = {}
        for record in records:
            topics.setdefault(record.topic, None)
            types.setdefault(normalize_assessment_type(record.assessment_type, self.type_labels), None)
            classes.setdefault(record.class_label, None)
        return {
            "topic": list(topics),
            "assessment_type": list(types),
            "class_name": list(classes),
            "date_bucket": list(self.DATE_BUCKETS),
        }
