"""Exceptions du moteur de suivi de progression."""


class TrackerError(Exception):
    """Exception de base pour toutes les erreurs du suivi."""
    pass


class ValidationError(TrackerError):
    """Entrée malformée ou hors bornes, rejetée avant tout appel réseau."""
    pass


class AuthorizationError(TrackerError):
    """Violation de périmètre (rôle ou identité)."""
    pass


class TransientIOError(TrackerError):
    """Échec réseau ou de décodage lors d'une lecture ou d'une écriture."""
    pass


class NotFoundError(TrackerError):
    """Relevé introuvable côté stockage (404)."""
    pass
