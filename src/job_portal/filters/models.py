"""
Facet models for list-view filtering.

These models define the facets a view filters on and the results of the
facet chain.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List

from job_portal.models import Record


class FacetKind(str, Enum):
    """Kind of facet predicate."""

    ENUM = "enum"
    NUMERIC_RANGE = "numeric_range"
    TEXT = "text"
    DATE_BUCKET = "date_bucket"
    SEARCH = "search"


@dataclass(frozen=True)
class FacetSpec:
    """
    One active filter predicate.

    Attributes:
        key: Facet name (e.g., "status", "salary", "location")
        kind: Kind of predicate
        predicate: Pure function deciding whether a record passes
        value: Facet value the predicate was built from, for logging
    """

    key: str
    kind: FacetKind
    predicate: Callable[[Record], bool]
    value: Any = None

    def __call__(self, record: Record) -> bool:
        return self.predicate(record)


@dataclass
class FilterRejection:
    """
    A facet that rejected a record.

    Attributes:
        facet_key: Facet that rejected (e.g., "status", "date")
        kind: Kind of the facet
        detail: Specific detail about why rejected
    """

    facet_key: str
    kind: str
    detail: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "facet_key": self.facet_key,
            "kind": self.kind,
            "detail": self.detail,
        }


@dataclass
class FilterResult:
    """
    Result of running the facet chain on one record.

    Attributes:
        passed: True if the record passed every facet
        rejections: Facets that rejected it (empty if passed)
    """

    passed: bool
    rejections: List[FilterRejection] = field(default_factory=list)

    def add_rejection(self, facet_key: str, kind: str, detail: str) -> None:
        """
        Add a rejection reason.

        Args:
            facet_key: Facet name
            kind: Facet kind
            detail: Specific detail
        """
        self.passed = False
        self.rejections.append(FilterRejection(facet_key=facet_key, kind=kind, detail=detail))

    def get_rejection_summary(self) -> str:
        """
        Get comma-separated list of rejecting facets.

        Returns:
            Summary string like "status, salary"
        """
        if not self.rejections:
            return "No rejections"
        return ", ".join([r.facet_key for r in self.rejections])

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "passed": self.passed,
            "rejections": [r.to_dict() for r in self.rejections],
            "rejection_summary": self.get_rejection_summary(),
        }
