"""Indicateurs de suivi : moyennes par étudiant, tendances, élèves à risque."""

from typing import Any, Dict, Iterable, List, Optional
import numpy as np
import pandas as pd

from progress_tracker.core.aggregator import Aggregator
from progress_tracker.core.models import DEFAULT_CLASS_NAME, ProgressRecord, TrackerConfig
from progress_tracker.core.rounding import round_half_away_from_zero


class InsightEngine:
    """Calcule les indicateurs de suivi d'un ensemble filtré de relevés."""

    def __init__(self, records: Iterable[ProgressRecord], config: TrackerConfig = None):
        """
        Initialise le moteur.

        Args:
            records: Relevés filtrés
            config: Seuils (élèves à risque, tendance, maîtrise)
        """
        self.config = config or TrackerConfig()
        self.aggregator = Aggregator(records, self.config)
        self.df = self.aggregator.df

    def student_averages(self) -> List[Dict[str, Any]]:
        """
        Moyenne par étudiant.

        Returns:
            Liste de dicts student_id, name, class_name, average, records
        """
        if self.df.empty:
            return []

        rows = []
        for student_id, group in self.df.groupby("student_id", sort=False):
            names = group["student_name"].dropna()
            # Première classe explicite, sinon "Unassigned"
            classes = group.loc[group["class_name"] != DEFAULT_CLASS_NAME, "class_name"]
            rows.append({
                "student_id": student_id,
                "name": names.iloc[0] if not names.empty else student_id,
                "class_name": classes.iloc[0] if not classes.empty else DEFAULT_CLASS_NAME,
                "average": round_half_away_from_zero(int(group["score"].sum()), len(group)),
                "records": len(group),
            })
        return rows

    def student_trend(self, student_id: str) -> Dict[str, Any]:
        """
        Compare la moitié récente des scores d'un étudiant à la plus ancienne.

        Returns:
            Dict avec trend ("improving", "declining", "stable") et change
        """
        scores = (
            self.df[self.df["student_id"] == student_id]
            .sort_values("recorded_at", kind="mergesort", na_position="last")["score"]
            .to_numpy(dtype=float)
        )
        if len(scores) < 2:
            return {"trend": "stable", "change": 0.0}

        mid = len(scores) // 2
        change = float(np.mean(scores[mid:]) - np.mean(scores[:mid]))

        if change > self.config.trend_delta:
            return {"trend": "improving", "change": round(change, 2)}
        if change < -self.config.trend_delta:
            return {"trend": "declining", "change": round(change, 2)}
        return {"trend": "stable", "change": round(change, 2)}

    def topic_mastery(self, average: float) -> str:
        """Niveau de maîtrise correspondant à une moyenne."""
        for threshold, level in self.config.mastery_levels:
            if average >= threshold:
                return level
        return self.config.mastery_fallback

    def topic_extremes(self) -> Dict[str, Optional[Dict[str, Any]]]:
        """Thèmes le plus et le moins réussis."""
        topics = self.aggregator.topic_averages()
        if not topics:
            return {"highest": None, "lowest": None}

        ranked = sorted(topics, key=lambda t: t["average"], reverse=True)
        return {"highest": ranked[0], "lowest": ranked[-1]}

    def at_risk_students(self, threshold: float = None) -> List[Dict[str, Any]]:
        """Étudiants dont la moyenne est sous le seuil."""
        threshold = self.config.at_risk_threshold if threshold is None else threshold
        return [s for s in self.student_averages() if s["average"] < threshold]

    def pass_rate(self, threshold: float = None) -> int:
        """Pourcentage arrondi des relevés au-dessus du seuil."""
        threshold = self.config.at_risk_threshold if threshold is None else threshold
        if self.df.empty:
            return 0
        passed = int((self.df["score"] >= threshold).sum())
        return round_half_away_from_zero(passed * 100, len(self.df))

    def overview(self) -> Dict[str, Any]:
        """Synthèse « en un coup d'œil » pour les rapports."""
        extremes = self.topic_extremes()
        return {
            "average": self.aggregator.gauge()["average"],
            "pass_rate": self.pass_rate(),
            "total_records": len(self.df),
            "topics_covered": int(self.df["topic"].nunique()) if not self.df.empty else 0,
            "at_risk": len(self.at_risk_students()),
            "strongest_topic": extremes["highest"],
            "weakest_topic": extremes["lowest"],
        }

    def leaderboard(self) -> pd.DataFrame:
        """Tableau des moyennes par étudiant, avec tendance et maîtrise."""
        rows = []
        for student in self.student_averages():
            trend = self.student_trend(student["student_id"])
            rows.append({
                **student,
                "trend": trend["trend"],
                "change": trend["change"],
                "mastery": self.topic_mastery(student["average"]),
            })

        columns = ["student_id", "name", "class_name", "average", "records", "trend", "change", "mastery"]
        df = pd.DataFrame(rows, columns=columns)
        return df.sort_values("average", ascending=False, kind="mergesort")
