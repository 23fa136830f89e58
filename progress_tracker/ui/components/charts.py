"""Composants graphiques avec Plotly."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

PALETTE = ["#6366F1", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#0EA5E9"]


class ChartComponent(ABC):
    """Classe de base pour les graphiques."""

    @abstractmethod
    def figure(self) -> go.Figure:
        pass

    def render(self):
        st.plotly_chart(self.figure(), use_container_width=True)


class LineChart(ChartComponent):
    """Graphique linéaire (série chronologique)."""

    def __init__(
        self,
        points: List[Dict],
        title: str = "",
        x_label: str = "",
        y_label: str = "",
        color: str = "#10B981"
    ):
        self.points = points
        self.title = title
        self.x_label = x_label
        self.y_label = y_label
        self.color = color

    def figure(self) -> go.Figure:
        fig = go.Figure()

        # Un point par relevé : l'abscisse est la position, la date sert d'étiquette
        fig.add_trace(go.Scatter(
            x=list(range(len(self.points))),
            y=[p["score"] for p in self.points],
            text=[p["date"] for p in self.points],
            mode="lines+markers",
            name="Score",
            line=dict(color=self.color, width=3),
            marker=dict(size=8),
            hovertemplate="%{text}<br>%{y}%<extra></extra>"
        ))

        fig.update_layout(
            title=self.title,
            xaxis=dict(
                title=self.x_label,
                tickmode="array",
                tickvals=list(range(len(self.points))),
                ticktext=[p["date"] for p in self.points],
            ),
            yaxis=dict(title=self.y_label, range=[0, 105], ticksuffix="%"),
            hovermode="x unified"
        )
        return fig


class BarChart(ChartComponent):
    """Graphique en barres."""

    def __init__(
        self,
        data: pd.Series,
        title: str = "",
        x_label: str = "",
        y_label: str = "",
        color: str = "#6366F1",
        horizontal: bool = False
    ):
        self.data = data
        self.title = title
        self.x_label = x_label
        self.y_label = y_label
        self.color = color
        self.horizontal = horizontal

    def figure(self) -> go.Figure:
        if self.horizontal:
            fig = px.bar(
                x=self.data.values,
                y=self.data.index,
                orientation='h',
                title=self.title,
                labels={'x': self.y_label, 'y': self.x_label}
            )
            fig.update_xaxes(range=[0, 105], ticksuffix="%")
        else:
            fig = px.bar(
                x=self.data.index,
                y=self.data.values,
                title=self.title,
                labels={'x': self.x_label, 'y': self.y_label}
            )
            fig.update_yaxes(range=[0, 105], ticksuffix="%")

        fig.update_traces(marker_color=self.color, text=[f"{v}%" for v in self.data.values], textposition="outside")
        return fig


class DonutChart(ChartComponent):
    """Répartition en anneau."""

    def __init__(self, data: pd.Series, title: str = ""):
        self.data = data
        self.title = title

    def figure(self) -> go.Figure:
        fig = go.Figure(go.Pie(
            labels=self.data.index,
            values=self.data.values,
            hole=0.45,
            marker=dict(colors=PALETTE),
            textinfo="label+value"
        ))
        fig.update_layout(title=self.title)
        return fig


class GaugeChart(ChartComponent):
    """Jauge en anneau : moyenne et complément à 100."""

    def __init__(self, average: int, remainder: int, title: Optional[str] = None):
        self.average = average
        self.remainder = remainder
        self.title = title

    def figure(self) -> go.Figure:
        fig = go.Figure(go.Pie(
            labels=["Score", "Restant"],
            values=[self.average, self.remainder],
            hole=0.75,
            sort=False,
            direction="clockwise",
            marker=dict(colors=["#6366F1", "#E5E7EB"]),
            textinfo="none"
        ))
        fig.update_layout(
            title=self.title,
            showlegend=False,
            height=260,
            annotations=[dict(text=f"{self.average}%", x=0.5, y=0.5, font_size=32, showarrow=False)]
        )
        return fig
