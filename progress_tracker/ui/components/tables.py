"""Composants de tableaux de données."""

import streamlit as st
import pandas as pd
from typing import Optional


class DataTable:
    """Tableau de données configurable."""

    def __init__(
        self,
        data: pd.DataFrame,
        title: Optional[str] = None,
        height: int = 400,
        use_container_width: bool = True
    ):
        self.data = data
        self.title = title
        self.height = height
        self.use_container_width = use_container_width

    def render(self):
        if self.title:
            st.subheader(self.title)

        st.dataframe(
            self.data,
            use_container_width=self.use_container_width,
            height=self.height,
            hide_index=True
        )


class AtRiskTable:
    """Tableau des étudiants sous le seuil de réussite."""

    def __init__(self, data: pd.DataFrame, threshold: float, title: str = "Étudiants à risque"):
        self.data = data
        self.threshold = threshold
        self.title = title

    def render(self):
        if self.data.empty:
            st.success(f"Aucun étudiant sous {self.threshold:.0f}% de moyenne.")
            return

        st.subheader(self.title)
        st.warning(f"{len(self.data)} étudiant(s) sous la barre des {self.threshold:.0f}%")

        # Colorer selon l'écart au seuil
        def color_average(val):
            if isinstance(val, (int, float)):
                if val < self.threshold - 20:
                    return 'background-color: #ffcccc'
                elif val < self.threshold:
                    return 'background-color: #ffffcc'
            return ''

        styled = self.data.style.map(color_average, subset=["average"])
        st.dataframe(styled, use_container_width=True, hide_index=True)
