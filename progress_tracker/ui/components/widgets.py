"""Widgets réutilisables pour l'interface."""

import streamlit as st
from typing import Optional


class MetricCard:
    """Carte de métrique avec valeur et description."""

    def __init__(
        self,
        label: str,
        value: str,
        delta: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        self.label = label
        self.value = value
        self.delta = delta
        self.help_text = help_text

    def render(self):
        if self.delta:
            st.metric(
                label=self.label,
                value=self.value,
                delta=self.delta,
                help=self.help_text
            )
        else:
            st.metric(
                label=self.label,
                value=self.value,
                help=self.help_text
            )


class MasteryBadge:
    """Badge de niveau de maîtrise d'un thème."""

    LEVELS = {
        'Expert': '🟢',
        'Proficient': '🔵',
        'Developing': '🟡',
        'Needs Support': '🔴',
    }

    def __init__(self, topic: str, average: int, level: str):
        self.topic = topic
        self.average = average
        self.level = level

    def render(self) -> str:
        icon = self.LEVELS.get(self.level, '⚪')
        return f"{icon} {self.topic} : {self.level} ({self.average}%)"
