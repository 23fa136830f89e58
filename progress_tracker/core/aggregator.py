"""Agrégations analytiques sur un ensemble filtré de relevés."""

from typing import Any, Dict, Iterable, List
import pandas as pd

from progress_tracker.core.frames import records_to_frame
from progress_tracker.core.models import ProgressRecord, TrackerConfig
from progress_tracker.core.rounding import round_half_away_from_zero


def group_scores(df: pd.DataFrame, key: str) -> Dict[str, Dict[str, int]]:
    """
    Regroupe les scores par clé.

    Returns:
        Dict ordonné (ordre de première apparition) clé -> {average, records}
    """
    if df.empty:
        return {}

    grouped = df.groupby(key, sort=False, dropna=False)["score"].agg(["sum", "count"])
    result = {}
    for name, row in grouped.iterrows():
        total, count = int(row["sum"]), int(row["count"])
        result[name] = {
            "average": round_half_away_from_zero(total, count),
            "records": count,
        }
    return result


class Aggregator:
    """Calcule les vues agrégées d'un ensemble de relevés déjà filtré."""

    def __init__(self, records: Iterable[ProgressRecord], config: TrackerConfig = None):
        """
        Initialise l'agrégateur.

        Args:
            records: Relevés filtrés
            config: Configuration (libellés de types, format de date)
        """
        self.config = config or TrackerConfig()
        self.records = list(records)
        self.df = records_to_frame(self.records, self.config.type_labels)

    def topic_averages(self) -> List[Dict[str, Any]]:
        """Moyenne arrondie par thème."""
        return [
            {"topic": topic, **stats}
            for topic, stats in group_scores(self.df, "topic").items()
        ]

    def class_averages(self) -> List[Dict[str, Any]]:
        """Moyenne arrondie par classe."""
        return [
            {"class_name": name, **stats}
            for name, stats in group_scores(self.df, "class_name").items()
        ]

    def trend(self) -> List[Dict[str, Any]]:
        """Série chronologique (date, score), un point par relevé."""
        if self.df.empty:
            return []

        ordered = self.df.sort_values("recorded_at", kind="mergesort", na_position="last")
        points = []
        for recorded_at, score in zip(ordered["recorded_at"], ordered["score"]):
            label = "" if pd.isna(recorded_at) else recorded_at.strftime(self.config.date_format)
            points.append({"date": label, "score": int(score)})
        return points

    def type_distribution(self) -> List[Dict[str, Any]]:
        """Nombre de relevés par type d'évaluation normalisé."""
        if self.df.empty:
            return []

        counts = self.df.groupby("type_label", sort=False).size()
        return [{"type": label, "count": int(n)} for label, n in counts.items()]

    def gauge(self) -> Dict[str, int]:
        """Jauge de synthèse : moyenne et complément à 100."""
        if self.df.empty:
            return {"average": 0, "remainder": 100}

        average = round_half_away_from_zero(int(self.df["score"].sum()), len(self.df))
        return {"average": average, "remainder": max(0, 100 - average)}

    def summary(self) -> Dict[str, Any]:
        """Toutes les vues agrégées en un seul dict."""
        return {
            "topic_averages": self.topic_averages(),
            "trend": self.trend(),
            "type_distribution": self.type_distribution(),
            "class_averages": self.class_averages(),
            "gauge": self.gauge(),
        }
