"""Chargeurs de données hors ligne."""

import logging
from abc import ABC, abstractmethod
from typing import List
import pandas as pd

from progress_tracker.core.models import ProgressRecord

logger = logging.getLogger(__name__)


class DataLoader(ABC):
    """Classe de base pour les chargeurs de relevés."""

    @abstractmethod
    def load(self) -> List[ProgressRecord]:
        """Charge les relevés."""
        pass


class CSVLoader(DataLoader):
    """Chargeur d'un export CSV de relevés (séparateur ;)."""

    def __init__(self, path):
        """Initialise avec le chemin (ou un objet fichier) du CSV."""
        self.path = path

    def load(self) -> List[ProgressRecord]:
        """Charge le CSV ; les lignes illisibles sont ignorées."""
        df = pd.read_csv(self.path, sep=';', dtype=str, keep_default_na=False)

        records = []
        for idx, row in df.iterrows():
            payload = {k: v for k, v in row.items() if v != ''}
            if not payload.get('studentId') or not payload.get('topic'):
                logger.warning("Ligne %d ignorée: studentId ou topic manquant", idx + 2)
                continue
            try:
                records.append(ProgressRecord.from_dict(payload))
            except ValueError as e:
                logger.warning("Ligne %d ignorée: %s", idx + 2, e)

        return records

