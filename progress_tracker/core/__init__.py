"""Core module - Logique métier pure."""

from progress_tracker.core.errors import (
    TrackerError,
    ValidationError,
    AuthorizationError,
    TransientIOError,
    NotFoundError,
)
from progress_tracker.core.models import (
    ProgressRecord,
    Role,
    AllRecords,
    SingleStudent,
    Filters,
    TrackerConfig,
)
from progress_tracker.core.scope import AccessScopeResolver
from progress_tracker.core.filters import FilterPipeline
from progress_tracker.core.aggregator import Aggregator
from progress_tracker.core.scoring import InsightEngine
from progress_tracker.core.view import ProgressView
from progress_tracker.core.mutations import MutationCoordinator

__all__ = [
    "TrackerError",
    "ValidationError",
    "AuthorizationError",
    "TransientIOError",
    "NotFoundError",
    "ProgressRecord",
    "Role",
    "AllRecords",
    "SingleStudent",
    "Filters",
    "TrackerConfig",
    "AccessScopeResolver",
    "FilterPipeline",
    "Aggregator",
    "InsightEngine",
    "ProgressView",
    "MutationCoordinator",
]
