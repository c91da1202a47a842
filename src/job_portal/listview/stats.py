"""Summary figures shown above list views (status counts, active filters)."""

from typing import Any, Dict, Iterable, Mapping, Sequence

from job_portal.filters.facets import FacetDefinition
from job_portal.models import Record


def calculate_stats(records: Iterable[Record], statuses: Sequence[str]) -> Dict[str, int]:
    """
    Count records per status.

    Args:
        records: Records to count
        statuses: Statuses to report; each gets a key even when zero

    Returns:
        Dictionary with "total" plus one count per status
    """
    stats = {"total": 0}
    stats.update({status: 0 for status in statuses})
    for record in records:
        stats["total"] += 1
        if record.status in stats and record.status != "total":
            stats[record.status] += 1
    return stats


def status_percentage(stats: Mapping[str, int], status: str) -> float:
    """Share of ``status`` in percent; 0 for an empty list."""
    total = stats.get("total", 0)
    if not total:
        return 0.0
    return stats.get(status, 0) / total * 100


def count_applied_filters(
    definitions: Iterable[FacetDefinition], values: Mapping[str, Any]
) -> int:
    """
    Number of facets set to something other than their default.

    The search query is not a facet and is not counted.
    """
    count = 0
    for definition in definitions:
        if not definition.is_default(values.get(definition.key, definition.default_value())):
            count += 1
    return count
