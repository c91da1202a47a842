"""
Facet filter chain for list views.

Applies every active facet conjunctively. Facets are pure, so evaluation
order never changes the result; the chain stops at the first failing facet
for each record.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from job_portal.filters.models import FacetSpec, FilterResult
from job_portal.models import Record

logger = logging.getLogger(__name__)


class FacetFilterChain:
    """
    Conjunctive facet filter.

    ``None`` entries in the facet list are ignored, which lets callers pass
    the output of facet builders straight through (a builder returns None
    for a "match everything" value).
    """

    def __init__(self, facets: Optional[Iterable[Optional[FacetSpec]]] = None):
        """
        Initialize the chain.

        Args:
            facets: Default facets used when ``apply`` gets none
        """
        self.facets: List[FacetSpec] = self._active(facets or [])

    @staticmethod
    def _active(facets: Iterable[Optional[FacetSpec]]) -> List[FacetSpec]:
        return [f for f in facets if f is not None]

    def passes(self, record: Record, facets: Optional[Sequence[Optional[FacetSpec]]] = None) -> bool:
        """True if ``record`` passes every active facet."""
        active = self.facets if facets is None else self._active(facets)
        return all(facet.predicate(record) for facet in active)

    def apply(
        self,
        records: Iterable[Record],
        facets: Optional[Sequence[Optional[FacetSpec]]] = None,
    ) -> List[Record]:
        """
        Keep the records that pass every active facet, in input order.

        Args:
            records: Records to filter
            facets: Facets to apply; defaults to the chain's own facets

        Returns:
            Filtered list (a new list even when nothing was removed)
        """
        active = self.facets if facets is None else self._active(facets)
        records = list(records)

        if not active:
            return records

        kept = [r for r in records if all(facet.predicate(r) for facet in active)]

        logger.debug(
            f"Facet chain kept {len(kept)}/{len(records)} records "
            f"(facets: {', '.join(f.key for f in active)})"
        )
        return kept

    def explain(
        self, record: Record, facets: Optional[Sequence[Optional[FacetSpec]]] = None
    ) -> FilterResult:
        """
        Evaluate every facet without short-circuiting.

        Returns:
            FilterResult listing each facet that rejected the record
        """
        active = self.facets if facets is None else self._active(facets)
        result = FilterResult(passed=True)

        for facet in active:
            if not facet.predicate(record):
                result.add_rejection(
                    facet_key=facet.key,
                    kind=facet.kind.value,
                    detail=f"Record {record.id} does not match {facet.key}={facet.value!r}",
                )

        if not result.passed:
            logger.debug(f"Record {record.id} filtered: {result.get_rejection_summary()}")

        return result
