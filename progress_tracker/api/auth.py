"""Authentification auprès du stockage des relevés."""

import os
from typing import Dict


def get_auth_headers(token: str = None) -> Dict[str, str]:
    """
    Génère le header d'authentification Bearer.

    Args:
        token: Jeton d'accès (depuis .env si None)

    Returns:
        Dict avec header Authorization
    """
    token = token or os.getenv('PROGRESS_API_TOKEN')

    if not token:
        raise ValueError("PROGRESS_API_TOKEN doit être défini dans .env ou passé en argument")

    return {"Authorization": f"Bearer {token}"}
