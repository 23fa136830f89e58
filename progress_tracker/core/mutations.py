"""Création, modification et suppression de relevés."""

import logging
from typing import Any, Dict, Optional, Union

from progress_tracker.core.errors import TrackerError, ValidationError
from progress_tracker.core.models import ProgressRecord
from progress_tracker.core.validation import sanitize_update, validate_new_record
from progress_tracker.core.view import ProgressView

logger = logging.getLogger(__name__)


class MutationCoordinator:
    """
    Valide et exécute les écritures, puis rafraîchit la vue concernée.

    Une écriture échouée ne déclenche aucun rafraîchissement : la vue
    affichée reste inchangée. Une écriture réussie dont la relecture échoue
    est tout de même renvoyée ; la vue est alors marquée `stale`. La suppression se fait en deux temps
    (`stage_delete` puis `confirm_delete`).
    """

    def __init__(self, api, view: ProgressView):
        """
        Initialise le coordinateur.

        Args:
            api: Passerelle vers le stockage (create, update, delete)
            view: Vue à maintenir cohérente après écriture
        """
        self.api = api
        self.view = view
        self._staged_delete: Optional[Any] = None

    @property
    def staged_delete(self) -> Optional[Any]:
        """Identifiant en attente de confirmation de suppression."""
        return self._staged_delete

    def _authorize(self) -> None:
        self.view.resolver.authorize_mutation(self.view.role)

    def _refresh_after_write(self) -> None:
        try:
            self.view.refresh()
        except TrackerError as e:
            logger.warning("Écriture enregistrée mais relecture en échec: %s", e)

    def create(self, record: Union[ProgressRecord, Dict[str, Any]]) -> ProgressRecord:
        """
        Crée un relevé.

        La vue n'est rechargée que si elle affiche l'étudiant concerné.

        Returns:
            Relevé créé (avec id attribué par le stockage)
        """
        self._authorize()
        candidate = validate_new_record(record)

        created = self.api.create(candidate)
        logger.info("Relevé créé pour %s (%s)", created.student_id, created.topic)

        if self.view.shows_student(created.student_id):
            self._refresh_after_write()
        return created

    def update(self, record_id: Any, fields: Dict[str, Any]) -> Optional[ProgressRecord]:
        """
        Met à jour les champs modifiables d'un relevé puis recharge le
        périmètre actif.

        Args:
            record_id: Identifiant du relevé
            fields: Champs à modifier (les champs non modifiables sont ignorés)

        Returns:
            Relevé mis à jour si le stockage le renvoie, sinon None
        """
        self._authorize()
        if record_id is None or record_id == "":
            raise ValidationError("Identifiant de relevé manquant")

        changes = sanitize_update(fields)
        if not changes:
            logger.debug("Aucun champ modifiable pour le relevé %s", record_id)
            return None

        updated = self.api.update(record_id, changes)
        logger.info("Relevé %s mis à jour (%s)", record_id, ", ".join(changes))

        self._refresh_after_write()
        return updated

    def stage_delete(self, record_id: Any) -> None:
        """Sélectionne le relevé à supprimer (aucun effet avant confirmation)."""
        self._authorize()
        if record_id is None or record_id == "":
            raise ValidationError("Identifiant de relevé manquant")
        self._staged_delete = record_id

    def cancel_delete(self) -> None:
        """Abandonne la suppression en attente."""
        self._staged_delete = None

    def confirm_delete(self) -> Any:
        """
        Supprime le relevé sélectionné puis recharge le périmètre actif.

        Returns:
            Identifiant supprimé
        """
        self._authorize()
        record_id = self._staged_delete
        if record_id is None:
            raise ValidationError("Aucune suppression en attente")

        self.api.delete(record_id)
        self._staged_delete = None
        logger.info("Relevé %s supprimé", record_id)

        self._refresh_after_write()
        return record_id
