"""API module - Client et endpoints du stockage des relevés."""

from progress_tracker.api.client import RecordStoreClient
from progress_tracker.api.auth import get_auth_headers
from progress_tracker.api.progress import ProgressAPI

__all__ = [
    "RecordStoreClient",
    "get_auth_headers",
    "ProgressAPI",
]
