"""
Models for the application status workflow.

Lifecycle: pending → reviewed → shortlisted/accepted or rejected

- PENDING: Submitted, not looked at yet (initial state)
- REVIEWED: Opened by the employer
- SHORTLISTED / ACCEPTED: Moving forward (employer / admin vocabulary)
- REJECTED: Not moving forward

The screens in production let a reviewer pick any status from a dropdown,
so the default table is the complete graph. ``TransitionTable.strict``
enforces the forward-only progression instead.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from pydantic import BaseModel, Field

from job_portal.models import ApplicationStatus

EMPLOYER_STATUSES = [
    ApplicationStatus.PENDING.value,
    ApplicationStatus.REVIEWED.value,
    ApplicationStatus.SHORTLISTED.value,
    ApplicationStatus.REJECTED.value,
]

ADMIN_STATUSES = [
    ApplicationStatus.PENDING.value,
    ApplicationStatus.REVIEWED.value,
    ApplicationStatus.ACCEPTED.value,
    ApplicationStatus.REJECTED.value,
]


class TransitionMode(str, Enum):
    PERMISSIVE = "permissive"
    STRICT = "strict"


class TransitionTable(BaseModel):
    """
    Allowed ``from → to`` status changes.

    Attributes:
        statuses: Known statuses in display order
        allowed_from: Map from a status to the statuses reachable from it
        aliases: Alternative names resolved before any lookup
        initial: Status of a freshly submitted application
    """

    statuses: List[str]
    allowed_from: Dict[str, Set[str]]
    aliases: Dict[str, str] = Field(default_factory=dict)
    initial: str = ApplicationStatus.PENDING.value

    @classmethod
    def permissive(
        cls, statuses: Iterable[str] = EMPLOYER_STATUSES, aliases: Optional[Mapping[str, str]] = None
    ) -> "TransitionTable":
        """Any status may move to any other status."""
        statuses = [s.lower() for s in statuses]
        allowed = {s: {t for t in statuses if t != s} for s in statuses}
        return cls(statuses=statuses, allowed_from=allowed, aliases=dict(aliases or {}))

    @classmethod
    def strict(
        cls, statuses: Iterable[str] = EMPLOYER_STATUSES, aliases: Optional[Mapping[str, str]] = None
    ) -> "TransitionTable":
        """
        pending → reviewed → {positive outcome, rejected}, no way back.

        ``statuses`` must list pending, reviewed, the positive outcome and
        rejected, in that order.
        """
        statuses = [s.lower() for s in statuses]
        if len(statuses) != 4:
            raise ValueError(
                "Strict workflow expects [pending, reviewed, <positive>, rejected], "
                f"got {statuses}"
            )
        pending, reviewed, positive, rejected = statuses
        allowed = {
            pending: {reviewed},
            reviewed: {positive, rejected},
            positive: set(),
            rejected: set(),
        }
        return cls(
            statuses=statuses, allowed_from=allowed, aliases=dict(aliases or {}), initial=pending
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TransitionTable":
        """
        Build a table from a ``workflows`` entry in config.yaml.

        Keys: mode (permissive|strict), statuses, aliases.
        """
        mode = TransitionMode(config.get("mode", TransitionMode.PERMISSIVE.value))
        statuses = config.get("statuses") or EMPLOYER_STATUSES
        aliases = config.get("aliases") or {}
        if mode == TransitionMode.STRICT:
            return cls.strict(statuses, aliases)
        return cls.permissive(statuses, aliases)

    def canonical(self, status: Optional[str]) -> Optional[str]:
        """Lower-case ``status`` and resolve aliases."""
        if status is None:
            return None
        status = str(status).strip().lower()
        return self.aliases.get(status, status)

    def is_known(self, status: Optional[str]) -> bool:
        return self.canonical(status) in self.allowed_from

    def is_allowed(self, from_status: Optional[str], to_status: Optional[str]) -> bool:
        """True if the table permits ``from_status → to_status``."""
        source = self.canonical(from_status) or self.initial
        target = self.canonical(to_status)
        return target in self.allowed_from.get(source, set())

    def targets(self, from_status: Optional[str]) -> List[str]:
        """Statuses reachable from ``from_status``, in display order."""
        allowed = self.allowed_from.get(self.canonical(from_status) or self.initial, set())
        return [s for s in self.statuses if s in allowed]


class StatusEntity(BaseModel):
    """
    Workflow state of one record during a view session.

    ``pending_status`` is only set between the optimistic update and the
    server's answer. ``generation`` counts transition requests so a late
    answer to a superseded request can be recognized.
    """

    record_id: str
    current_status: str
    pending_status: Optional[str] = None
    generation: int = 0

    @property
    def displayed_status(self) -> str:
        """Status the user currently sees."""
        return self.pending_status if self.pending_status is not None else self.current_status

    @property
    def in_flight(self) -> bool:
        return self.pending_status is not None
