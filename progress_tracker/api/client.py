"""Client HTTP du stockage des relevés."""

import os
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from progress_tracker.api.auth import get_auth_headers
from progress_tracker.core.errors import AuthorizationError, NotFoundError, TransientIOError

DEFAULT_ENDPOINT = 'http://localhost:54321/functions/v1/make-server/'
GENERIC_ERROR = "Échec de la requête"


class RecordStoreClient:
    """Client HTTP du stockage avec gestion d'erreurs, sans retry par défaut."""

    def __init__(
        self,
        endpoint: str = None,
        token: str = None,
        timeout: int = 10,
        max_retries: int = 0
    ):
        """
        Initialise le client.

        Args:
            endpoint: URL de l'API (depuis env si None)
            token: Jeton Bearer
            timeout: Timeout des requêtes en secondes
            max_retries: Nombre de retries (0 : un seul essai par appel)
        """
        endpoint = endpoint or os.getenv('PROGRESS_API_ENDPOINT', DEFAULT_ENDPOINT)
        self.endpoint = endpoint if endpoint.endswith('/') else endpoint + '/'
        self.timeout = timeout

        self.session = requests.Session()

        retry_strategy = Retry(total=max_retries, backoff_factor=1, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers.update(get_auth_headers(token))
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extrait le champ `error` du corps, sinon un message générique."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('error'):
            return str(body['error'])
        return f"{GENERIC_ERROR} (HTTP {response.status_code})"

    def _handle_error(self, response: requests.Response) -> None:
        """Gère les erreurs HTTP et lève les exceptions appropriées."""
        if 200 <= response.status_code < 300:
            return

        message = self._error_message(response)

        if response.status_code in (401, 403):
            raise AuthorizationError(message)
        elif response.status_code == 404:
            raise NotFoundError(message)
        else:
            raise TransientIOError(message)

    def request(
        self,
        method: str,
        path: str,
        json: Dict[str, Any] = None,
        params: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """
        Effectue une requête et retourne le JSON décodé.

        Args:
            method: Verbe HTTP
            path: Chemin de l'endpoint (sans le base URL)
            json: Corps de la requête
            params: Paramètres de requête

        Returns:
            Réponse JSON décodée ({} si le corps est vide)
        """
        url = f"{self.endpoint}{path}"

        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TransientIOError(f"{GENERIC_ERROR}: {e}")

        self._handle_error(response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise TransientIOError(f"Réponse illisible pour {method} {path}")

    def get(self, path: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        """Effectue une requête GET."""
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        """Effectue une requête POST."""
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        """Effectue une requête PUT."""
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Dict[str, Any]:
        """Effectue une requête DELETE."""
        return self.request("DELETE", path)

    def get_progress(self, student_id: Optional[str] = None) -> Dict:
        """Raccourci pour récupérer les relevés (tous ou ceux d'un étudiant)."""
        if student_id:
            return self.get(f"progress/{requests.utils.quote(str(student_id), safe='')}")
        return self.get("progress")
