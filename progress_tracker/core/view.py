"""État de la vue affichée : périmètre actif et instantané des relevés."""

import logging
import threading
from typing import List, Optional, Union

from progress_tracker.core.models import ProgressRecord, Role, ScopeDescriptor
from progress_tracker.core.scope import AccessScopeResolver
from progress_tracker.data.refresh import ScheduledRefresh

logger = logging.getLogger(__name__)


class ProgressView:
    """
    Instantané des relevés pour le périmètre actuellement affiché.

    Chaque lecture prend un ticket ; un résultat n'est appliqué que si
    aucune lecture plus récente n'a déjà été appliquée. Un rafraîchissement
    reprend le dernier périmètre demandé : un changement de périmètre en
    cours n'est jamais annulé par une relecture de l'ancien. En cas
    d'échec, l'instantané précédent reste intact.
    """

    def __init__(
        self,
        api,
        role: Union[Role, str],
        caller_id: Optional[str],
        caller_email: Optional[str] = None,
        resolver: AccessScopeResolver = None
    ):
        """
        Initialise la vue.

        Args:
            api: Passerelle vers le stockage (fetch(scope) -> relevés)
            role: Rôle de l'appelant
            caller_id: Identifiant de l'appelant
            caller_email: Email de l'appelant (complète ses propres relevés)
            resolver: Résolveur de périmètre
        """
        self.api = api
        self.role = role
        self.caller_id = caller_id
        self.caller_email = caller_email
        self.resolver = resolver or AccessScopeResolver()

        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._scope: Optional[ScopeDescriptor] = None
        # Dernier périmètre demandé, appliqué ou non
        self._requested: Optional[ScopeDescriptor] = None
        self._records: List[ProgressRecord] = []
        self.stale = False

    @property
    def scope(self) -> Optional[ScopeDescriptor]:
        """Périmètre actuellement affiché (None avant le premier chargement)."""
        return self._scope

    @property
    def records(self) -> List[ProgressRecord]:
        """Copie de l'instantané courant."""
        with self._lock:
            return list(self._records)

    def load(self, requested_student_id: Optional[str] = None) -> List[ProgressRecord]:
        """Résout le périmètre demandé puis charge ses relevés."""
        scope = self.resolver.resolve(self.role, self.caller_id, requested_student_id)
        return self._fetch(scope)

    def refresh(self) -> List[ProgressRecord]:
        """Recharge le dernier périmètre demandé (le chargement en cours prime)."""
        with self._lock:
            target = self._requested
        if target is None:
            return self.records
        # Le périmètre est revalidé avant chaque lecture
        requested = getattr(target, "student_id", None)
        scope = self.resolver.resolve(self.role, self.caller_id, requested)
        return self._fetch(scope)

    def shows_student(self, student_id: str) -> bool:
        """Indique si la vue affiche exactement cet étudiant."""
        return getattr(self._scope, "student_id", None) == student_id

    def _enrich(self, records: List[ProgressRecord]) -> List[ProgressRecord]:
        if not self.caller_email or self.role != Role.STUDENT:
            return records
        return [
            r if r.student_email or r.student_id != self.caller_id
            else r.copy(student_email=self.caller_email)
            for r in records
        ]

    def _fetch(self, scope: ScopeDescriptor) -> List[ProgressRecord]:
        with self._lock:
            self._issued += 1
            ticket = self._issued
            self._requested = scope

        try:
            fetched = self.api.fetch(scope)
        except Exception:
            with self._lock:
                # Une lecture plus récente a pu aboutir entre-temps
                if ticket > self._applied:
                    self.stale = True
                if ticket == self._issued:
                    self._requested = self._scope
            raise

        records = self._enrich(self.resolver.restrict(scope, fetched))

        with self._lock:
            if ticket < self._applied:
                logger.debug("Lecture %d dépassée par la lecture %d, ignorée", ticket, self._applied)
                return list(self._records)
            self._applied = ticket
            self._scope = scope
            self._records = records
            self.stale = False
            return list(self._records)

    def auto_refresh(self, interval: float):
        """Retourne une tâche planifiée qui rafraîchit la vue (non démarrée)."""
        return ScheduledRefresh(self.refresh, interval)
