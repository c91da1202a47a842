"""
Facet builders.

Each builder turns a facet value picked in the UI into a ``FacetSpec``, or
returns None when the value means "match everything" so the facet drops
out of the chain.
"""

import logging
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field

from job_portal.filters.dates import DateBucket, RelativeDateClassifier
from job_portal.filters.models import FacetKind, FacetSpec
from job_portal.filters.salary import SalaryParser
from job_portal.filters.search import SearchIndexer
from job_portal.models import Record

logger = logging.getLogger(__name__)

MATCH_ALL = "all"


def _normalize_enum(value: Any) -> str:
    # "Full-Time", "full_time" and "full time" compare equal
    return str(value).strip().lower().replace("-", "_").replace(" ", "_")


def enum_facet(
    key: str, field: str, value: Any, match_all: str = MATCH_ALL
) -> Optional[FacetSpec]:
    """Equality on a categorical field (status, job type, experience)."""
    if value is None or value == "" or _normalize_enum(value) == _normalize_enum(match_all):
        return None

    wanted = _normalize_enum(value)

    def predicate(record: Record) -> bool:
        actual = record.get(field)
        return actual is not None and _normalize_enum(actual) == wanted

    return FacetSpec(key=key, kind=FacetKind.ENUM, predicate=predicate, value=value)


def numeric_range_facet(
    key: str,
    field: str,
    minimum: Optional[float],
    maximum: Optional[float],
    parser: Optional[SalaryParser] = None,
) -> Optional[FacetSpec]:
    """
    Inclusive range on a salary-like field.

    Records whose value is unknown (no digits) always pass so unpriced
    postings are never silently excluded.
    """
    if minimum is None and maximum is None:
        return None

    parse = parser or SalaryParser()

    def predicate(record: Record) -> bool:
        raw = record.get(field)
        if parse.is_unknown(raw):
            return True
        amount = parse(raw)
        if minimum is not None and amount < minimum:
            return False
        if maximum is not None and amount > maximum:
            return False
        return True

    return FacetSpec(
        key=key, kind=FacetKind.NUMERIC_RANGE, predicate=predicate, value=(minimum, maximum)
    )


def text_facet(key: str, field: str, value: Optional[str]) -> Optional[FacetSpec]:
    """Case-insensitive substring on one field (location)."""
    needle = (value or "").strip().lower()
    if not needle:
        return None

    def predicate(record: Record) -> bool:
        actual = record.get(field)
        return actual is not None and needle in str(actual).lower()

    return FacetSpec(key=key, kind=FacetKind.TEXT, predicate=predicate, value=value)


def date_bucket_facet(
    key: str,
    field: str,
    bucket: Any,
    classifier: Optional[RelativeDateClassifier] = None,
) -> Optional[FacetSpec]:
    """Relative date bucket membership (today / three_days / week / month)."""
    if bucket is None or str(bucket).lower() == DateBucket.ALL.value:
        return None

    classify = classifier or RelativeDateClassifier()
    bucket_value = str(bucket).lower()

    def predicate(record: Record) -> bool:
        return classify.matches(record.get(field), bucket_value)

    return FacetSpec(key=key, kind=FacetKind.DATE_BUCKET, predicate=predicate, value=bucket_value)


def search_facet(query: Optional[str], indexer: SearchIndexer) -> Optional[FacetSpec]:
    """Free-text search across the indexer's fields."""
    if not (query or "").strip():
        return None

    def predicate(record: Record) -> bool:
        return indexer.matches(query, record)

    return FacetSpec(key="search", kind=FacetKind.SEARCH, predicate=predicate, value=query)


class FacetDefinition(BaseModel):
    """
    Configured facet of a list view.

    Example (config.yaml):
        - key: salary
          kind: numeric_range
          field: jobPost.salary_range
          bounds: [0, 200]
          divisor: 1000000
    """

    key: str
    kind: FacetKind
    field: str
    match_all: str = MATCH_ALL
    bounds: Optional[List[float]] = None
    divisor: float = 1
    options: List[str] = Field(default_factory=list)

    def default_value(self) -> Any:
        """Value meaning "no filtering" for this facet."""
        if self.kind == FacetKind.NUMERIC_RANGE:
            return list(self.bounds) if self.bounds else None
        if self.kind == FacetKind.TEXT:
            return ""
        return self.match_all

    def is_default(self, value: Any) -> bool:
        """True if ``value`` leaves the facet inactive."""
        if self.kind == FacetKind.NUMERIC_RANGE:
            if value is None:
                return True
            return self.bounds is not None and list(value) == list(self.bounds)
        if self.kind == FacetKind.TEXT:
            return not (value or "").strip()
        if value is None or value == "":
            return True
        return _normalize_enum(value) == _normalize_enum(self.match_all)

    def build(
        self, value: Any, classifier: Optional[RelativeDateClassifier] = None
    ) -> Optional[FacetSpec]:
        """
        Build the predicate for ``value``.

        Returns:
            FacetSpec, or None when the value leaves the facet inactive
        """
        if self.is_default(value):
            return None

        if self.kind == FacetKind.ENUM:
            return enum_facet(self.key, self.field, value, self.match_all)

        if self.kind == FacetKind.NUMERIC_RANGE:
            minimum, maximum = _unpack_range(value)
            return numeric_range_facet(
                self.key, self.field, minimum, maximum, SalaryParser(divisor=self.divisor)
            )

        if self.kind == FacetKind.TEXT:
            return text_facet(self.key, self.field, value)

        if self.kind == FacetKind.DATE_BUCKET:
            return date_bucket_facet(self.key, self.field, value, classifier)

        raise ValueError(f"Facet '{self.key}' has unsupported kind: {self.kind}")


def _unpack_range(value: Sequence[Any]) -> tuple:
    if len(value) != 2:
        raise ValueError(f"Range facet expects [min, max], got {value!r}")
    minimum, maximum = value
    return (
        float(minimum) if minimum is not None else None,
        float(maximum) if maximum is not None else None,
    )
