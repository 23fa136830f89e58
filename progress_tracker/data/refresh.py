"""Rafraîchissement périodique annulable."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ScheduledRefresh:
    """
    Tâche planifiée : appelle `callback` toutes les `interval` secondes
    jusqu'à `cancel()`.

    S'utilise comme gestionnaire de contexte pour lier la tâche à une
    durée de vie (démarrage à l'entrée, annulation à la sortie).
    """

    def __init__(self, callback: Callable[[], object], interval: float, run_immediately: bool = False):
        if interval <= 0:
            raise ValueError(f"Intervalle invalide: {interval}")
        self.callback = callback
        self.interval = interval
        self.run_immediately = run_immediately
        self.runs = 0
        self.failures = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "ScheduledRefresh":
        """Démarre la tâche (sans effet si déjà démarrée)."""
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="scheduled-refresh", daemon=True)
        self._thread.start()
        return self

    def cancel(self, timeout: float = None) -> None:
        """Arrête la tâche et attend la fin de l'itération en cours."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _tick(self) -> None:
        try:
            self.callback()
            self.runs += 1
        except Exception as e:
            self.failures += 1
            logger.warning("Échec du rafraîchissement planifié: %s", e)

    def _loop(self) -> None:
        if self.run_immediately:
            self._tick()
        while not self._stop.wait(self.interval):
            self._tick()

    def __enter__(self) -> "ScheduledRefresh":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
