"""Configuration (fichier YAML + variables d'environnement)."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import yaml
from dotenv import load_dotenv

from progress_tracker.core.models import ASSESSMENT_TYPE_LABELS, TrackerConfig

load_dotenv()

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), '..', 'config', 'tracker.yaml')

# Valeurs utilisées si le fichier YAML est absent ou illisible
FALLBACK_CONFIG = {
    'AT_RISK_THRESHOLD': 70,
    'TREND_DELTA': 5,
    'REFRESH_INTERVAL_SECONDS': 30,
    'REQUEST_TIMEOUT': 10,
    'DATE_FORMAT': '%Y-%m-%d',
    'ASSESSMENT_TYPE_LABELS': dict(ASSESSMENT_TYPE_LABELS),
}


@dataclass
class TrackerSettings:
    """Paramètres de l'application."""
    endpoint: Optional[str] = None
    token: Optional[str] = None
    caller_id: Optional[str] = None
    caller_role: str = "teacher"
    request_timeout: int = 10
    refresh_interval: float = 30.0
    tracker: TrackerConfig = field(default_factory=TrackerConfig)


def _load_yaml(path: str) -> Dict[str, Any]:
    """Charge la configuration depuis le fichier YAML."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (FileNotFoundError, yaml.YAMLError):
        return dict(FALLBACK_CONFIG)

    if not isinstance(data, dict):
        return dict(FALLBACK_CONFIG)
    return {**FALLBACK_CONFIG, **data}


def load_settings(path: str = None) -> TrackerSettings:
    """
    Construit les paramètres à partir du YAML et de l'environnement.

    Args:
        path: Chemin du YAML (défaut: PROGRESS_CONFIG ou config/tracker.yaml)
    """
    path = path or os.getenv('PROGRESS_CONFIG', DEFAULT_CONFIG_PATH)
    config = _load_yaml(path)

    labels = {
        str(k).lower(): str(v)
        for k, v in (config.get('ASSESSMENT_TYPE_LABELS') or {}).items()
    }

    return TrackerSettings(
        endpoint=os.getenv('PROGRESS_API_ENDPOINT'),
        token=os.getenv('PROGRESS_API_TOKEN'),
        caller_id=os.getenv('PROGRESS_CALLER_ID'),
        caller_role=os.getenv('PROGRESS_CALLER_ROLE', 'teacher'),
        request_timeout=int(config['REQUEST_TIMEOUT']),
        refresh_interval=float(config['REFRESH_INTERVAL_SECONDS']),
        tracker=TrackerConfig(
            at_risk_threshold=float(config['AT_RISK_THRESHOLD']),
            trend_delta=float(config['TREND_DELTA']),
            date_format=str(config['DATE_FORMAT']),
            type_labels=labels,
        ),
    )
