"""Résolution du périmètre d'accès selon le rôle."""

import logging
from typing import List, Optional, Union

from progress_tracker.core.errors import AuthorizationError
from progress_tracker.core.models import (
    AllRecords,
    ProgressRecord,
    Role,
    ScopeDescriptor,
    SingleStudent,
)

logger = logging.getLogger(__name__)


class AccessScopeResolver:
    """Détermine les relevés qu'un appelant peut consulter ou modifier."""

    @staticmethod
    def _role(role: Union[Role, str]) -> Role:
        try:
            return Role(role)
        except ValueError:
            raise AuthorizationError(f"Rôle inconnu: {role}")

    def resolve(
        self,
        role: Union[Role, str],
        caller_id: Optional[str],
        requested_student_id: Optional[str] = None
    ) -> ScopeDescriptor:
        """
        Retourne le périmètre de lecture de l'appelant.

        Args:
            role: "student" ou "teacher"
            caller_id: Identifiant de l'appelant
            requested_student_id: Étudiant demandé (None = vue d'ensemble)

        Returns:
            AllRecords ou SingleStudent
        """
        role = self._role(role)

        if role is Role.STUDENT:
            if not caller_id:
                raise AuthorizationError("Identifiant étudiant manquant")
            if requested_student_id and requested_student_id != caller_id:
                raise AuthorizationError(
                    "Un étudiant ne peut consulter que ses propres relevés"
                )
            return SingleStudent(caller_id, self_scoped=True)

        if requested_student_id:
            return SingleStudent(requested_student_id)
        return AllRecords()

    def authorize_mutation(self, role: Union[Role, str]) -> None:
        """Lève AuthorizationError si le rôle ne peut pas modifier de relevés."""
        if self._role(role) is not Role.TEACHER:
            raise AuthorizationError("Modification réservée aux enseignants")

    @staticmethod
    def restrict(scope: ScopeDescriptor, records: List[ProgressRecord]) -> List[ProgressRecord]:
        """Écarte les relevés étrangers d'un périmètre personnel."""
        if not isinstance(scope, SingleStudent) or not scope.self_scoped:
            return list(records)

        kept = [r for r in records if r.student_id == scope.student_id]
        dropped = len(records) - len(kept)
        if dropped:
            logger.warning(
                "%d relevé(s) étranger(s) écarté(s) du périmètre de %s",
                dropped, scope.student_id
            )
        return kept
