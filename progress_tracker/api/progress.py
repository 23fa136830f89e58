"""Endpoints liés aux relevés de progression."""

import logging
from typing import Any, Dict, List, Optional
import requests

from progress_tracker.api.client import RecordStoreClient
from progress_tracker.core.errors import TransientIOError
from progress_tracker.core.models import AllRecords, ProgressRecord, ScopeDescriptor, SingleStudent

logger = logging.getLogger(__name__)


def _record_path(record_id: Any) -> str:
    return f"progress/{requests.utils.quote(str(record_id), safe='')}"


class ProgressAPI:
    """Passerelle typée vers les opérations CRUD du stockage."""

    def __init__(self, client: RecordStoreClient = None):
        """Initialise l'API avec un client configuré."""
        self.client = client or RecordStoreClient()

    @staticmethod
    def _parse_records(data: Any) -> List[ProgressRecord]:
        records = data.get('progress') if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise TransientIOError("Réponse inattendue: liste 'progress' absente")

        try:
            return [ProgressRecord.from_dict(item) for item in records if isinstance(item, dict)]
        except ValueError as e:
            raise TransientIOError(f"Relevé illisible: {e}")

    def fetch(self, scope: ScopeDescriptor) -> List[ProgressRecord]:
        """
        Récupère les relevés d'un périmètre.

        Returns:
            Liste de ProgressRecord dans l'ordre renvoyé par le stockage
        """
        if isinstance(scope, SingleStudent):
            data = self.client.get_progress(scope.student_id)
        elif isinstance(scope, AllRecords):
            data = self.client.get_progress()
        else:
            raise TypeError(f"Périmètre inconnu: {scope!r}")

        records = self._parse_records(data)
        logger.debug("%d relevé(s) chargé(s) pour %s", len(records), scope.describe())
        return records

    def create(self, record: ProgressRecord) -> ProgressRecord:
        """
        Crée un relevé.

        Le stockage renvoie soit le relevé complet, soit {success, id} ;
        dans le second cas le relevé soumis est complété avec l'id.
        """
        payload = record.to_dict()
        payload.pop('id', None)
        payload.pop('recordedBy', None)

        data = self.client.post("progress", payload)
        return self._merge_response(record, data)

    def update(self, record_id: Any, fields: Dict[str, Any]) -> Optional[ProgressRecord]:
        """
        Met à jour un relevé.

        Returns:
            Relevé mis à jour si renvoyé par le stockage, sinon None
        """
        data = self.client.put(_record_path(record_id), fields)
        body = data.get('progress', data) if isinstance(data, dict) else None
        if isinstance(body, dict) and ('studentId' in body or 'student_id' in body):
            try:
                return ProgressRecord.from_dict(body)
            except ValueError as e:
                raise TransientIOError(f"Relevé illisible: {e}")
        return None

    def delete(self, record_id: Any) -> None:
        """Supprime un relevé."""
        self.client.delete(_record_path(record_id))

    @staticmethod
    def _merge_response(submitted: ProgressRecord, data: Any) -> ProgressRecord:
        body = data.get('progress', data) if isinstance(data, dict) else {}
        if not isinstance(body, dict):
            body = {}

        try:
            if 'studentId' in body or 'student_id' in body:
                return ProgressRecord.from_dict(body)
            returned = ProgressRecord.from_dict(body)
        except ValueError as e:
            raise TransientIOError(f"Relevé illisible: {e}")

        return submitted.copy(
            id=returned.id if returned.id is not None else submitted.id,
            recorded_at=returned.recorded_at or submitted.recorded_at,
            recorded_by=returned.recorded_by,
        )
