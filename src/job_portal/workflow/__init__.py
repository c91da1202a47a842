"""Application status workflow."""

from job_portal.workflow.manager import StatusTransitionManager
from job_portal.workflow.models import (
    ADMIN_STATUSES,
    EMPLOYER_STATUSES,
    StatusEntity,
    TransitionMode,
    TransitionTable,
)

__all__ = [
    "ADMIN_STATUSES",
    "EMPLOYER_STATUSES",
    "StatusEntity",
    "StatusTransitionManager",
    "TransitionMode",
    "TransitionTable",
]
