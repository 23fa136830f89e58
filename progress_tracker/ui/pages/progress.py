"""Page d'affichage de la progression."""

import streamlit as st
import pandas as pd

from progress_tracker.core.aggregator import Aggregator
from progress_tracker.ui.components.charts import BarChart, DonutChart, LineChart


class ProgressPage:
    """Graphiques de progression calculés sur les relevés filtrés."""

    def __init__(self, aggregator: Aggregator):
        self.aggregator = aggregator

    def render(self):
        """Affiche la page complète."""
        if not self.aggregator.records:
            st.info("Aucun relevé pour les filtres sélectionnés.")
            return

        col1, col2 = st.columns(2)

        with col1:
            topics = self.aggregator.topic_averages()
            BarChart(
                data=pd.Series({t["topic"]: t["average"] for t in topics}),
                title="Moyenne par thème",
                x_label="Thème",
                y_label="Moyenne (%)"
            ).render()

        with col2:
            LineChart(
                points=self.aggregator.trend(),
                title="Évolution des scores",
                x_label="Date",
                y_label="Score (%)"
            ).render()

        st.divider()

        col3, col4 = st.columns(2)

        with col3:
            types = self.aggregator.type_distribution()
            DonutChart(
                data=pd.Series({t["type"]: t["count"] for t in types}),
                title="Types d'évaluation"
            ).render()

        with col4:
            classes = self.aggregator.class_averages()
            BarChart(
                data=pd.Series({c["class_name"]: c["average"] for c in classes}),
                title="Moyenne par classe",
                x_label="Classe",
                y_label="Moyenne (%)",
                color="#0EA5E9",
                horizontal=True
            ).render()
