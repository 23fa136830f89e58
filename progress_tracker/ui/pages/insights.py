"""Page de suivi : moyennes par étudiant, élèves à risque, maîtrise."""

import streamlit as st
import pandas as pd

from progress_tracker.core.scoring import InsightEngine
from progress_tracker.ui.components.tables import AtRiskTable, DataTable
from progress_tracker.ui.components.widgets import MasteryBadge, MetricCard


class InsightsPage:
    """Indicateurs de suivi et export du classement."""

    def __init__(self, engine: InsightEngine):
        self.engine = engine

    def render(self):
        """Affiche la page complète."""
        overview = self.engine.overview()
        threshold = self.engine.config.at_risk_threshold

        col1, col2, col3 = st.columns(3)
        with col1:
            MetricCard("Taux de réussite", f"{overview['pass_rate']}%",
                       help_text=f"Relevés ≥ {threshold:.0f}%").render()
        with col2:
            strongest = overview["strongest_topic"]
            MetricCard("Thème le plus réussi",
                       f"{strongest['topic']} ({strongest['average']}%)" if strongest else "-").render()
        with col3:
            weakest = overview["weakest_topic"]
            MetricCard("À renforcer",
                       f"{weakest['topic']} ({weakest['average']}%)" if weakest else "-").render()

        st.divider()

        st.subheader("🏆 Moyennes par étudiant")
        leaderboard = self.engine.leaderboard()
        display_cols = {
            'name': 'Nom',
            'class_name': 'Classe',
            'average': 'Moyenne',
            'records': 'Relevés',
            'trend': 'Tendance',
            'mastery': 'Maîtrise',
        }
        DataTable(leaderboard.rename(columns=display_cols)[list(display_cols.values())], height=300).render()

        st.divider()

        at_risk = pd.DataFrame(self.engine.at_risk_students(), columns=["student_id", "name", "class_name", "average", "records"])
        AtRiskTable(at_risk, threshold).render()

        st.divider()

        st.subheader("🎯 Maîtrise par thème")
        for topic in self.engine.aggregator.topic_averages():
            badge = MasteryBadge(topic["topic"], topic["average"], self.engine.topic_mastery(topic["average"]))
            st.markdown(badge.render())

        st.divider()
        csv = leaderboard.to_csv(index=False).encode('utf-8')
        st.download_button(
            label="Télécharger le classement (CSV)",
            data=csv,
            file_name='classement.csv',
            mime='text/csv'
        )
