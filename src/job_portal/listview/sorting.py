"""
Named sort strategies for list views.

Every comparator is a total order: equal primary keys fall back to the
record identifier, so the same input always renders in the same order.
Records missing the sort value (no date, unknown salary) go last in both
directions.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from job_portal.filters.dates import parse_timestamp
from job_portal.filters.salary import UNKNOWN_SALARY, parse_salary
from job_portal.models import Record

logger = logging.getLogger(__name__)

Comparator = Callable[[Record, Record], int]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    """
    A named sort strategy.

    Attributes:
        key: Strategy name used by the UI ("newest", "salary_desc", ...)
        direction: Direction of the primary key
        compare: Primary comparator returning -1, 0 or 1
        preserve_order: Keep input order (server relevance) instead of sorting
        label: Human-readable name
    """

    key: str
    direction: SortDirection
    compare: Comparator
    preserve_order: bool = False
    label: str = ""


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def id_sort_key(record_id: str) -> Tuple[int, Any]:
    """Numeric ids compare numerically, everything else as text."""
    if record_id.isdigit():
        return (0, int(record_id))
    return (1, record_id)


def compare_ids(a: Record, b: Record) -> int:
    key_a, key_b = id_sort_key(a.id), id_sort_key(b.id)
    if key_a == key_b:
        return 0
    return -1 if key_a < key_b else 1


def _missing_last(
    extract: Callable[[Record], Optional[Any]], direction: SortDirection
) -> Comparator:
    """Build a comparator over ``extract`` that puts None values last."""
    flip = -1 if direction == SortDirection.DESC else 1

    def compare(a: Record, b: Record) -> int:
        value_a, value_b = extract(a), extract(b)
        if value_a is None and value_b is None:
            return 0
        if value_a is None:
            return 1
        if value_b is None:
            return -1
        if value_a == value_b:
            return 0
        return flip * (-1 if value_a < value_b else 1)

    return compare


def by_date(field: str, direction: SortDirection) -> Comparator:
    def extract(record: Record) -> Optional[datetime]:
        return parse_timestamp(record.get(field))

    return _missing_last(extract, direction)


def by_salary(field: str, direction: SortDirection) -> Comparator:
    def extract(record: Record) -> Optional[int]:
        amount = parse_salary(record.get(field))
        return None if amount == UNKNOWN_SALARY else amount

    return _missing_last(extract, direction)


def by_text(field: str, direction: SortDirection = SortDirection.ASC) -> Comparator:
    def extract(record: Record) -> Optional[str]:
        value = record.get(field)
        return str(value).casefold() if value is not None else None

    return _missing_last(extract, direction)


def with_tiebreak(compare: Comparator) -> Comparator:
    """Fall back to the record identifier when ``compare`` reports a tie."""

    def total(a: Record, b: Record) -> int:
        result = _sign(compare(a, b))
        if result != 0:
            return result
        return compare_ids(a, b)

    return total


class ComparatorRegistry:
    """
    Registry of named sort strategies.

    Built-in strategies: newest, oldest, salary_desc, salary_asc,
    alphabetical and relevance. Views register their own with ``register``.

    Example:
        ```python
        registry = ComparatorRegistry(date_field="applied_at")
        page = registry.sort(records, "newest")
        ```
    """

    def __init__(
        self,
        date_field: str = "created_at",
        salary_field: str = "salary",
        title_field: str = "title",
        default: str = "newest",
    ):
        """
        Initialize registry with the built-in strategies.

        Args:
            date_field: Dotted path of the timestamp used by newest/oldest
            salary_field: Dotted path of the salary text
            title_field: Dotted path of the title for alphabetical order
            default: Strategy used for unknown keys
        """
        self._strategies: Dict[str, SortSpec] = {}
        self.default = default

        self.register(
            SortSpec("newest", SortDirection.DESC, by_date(date_field, SortDirection.DESC),
                     label="Newest first")
        )
        self.register(
            SortSpec("oldest", SortDirection.ASC, by_date(date_field, SortDirection.ASC),
                     label="Oldest first")
        )
        self.register(
            SortSpec("salary_desc", SortDirection.DESC,
                     by_salary(salary_field, SortDirection.DESC), label="Salary: High to Low")
        )
        self.register(
            SortSpec("salary_asc", SortDirection.ASC,
                     by_salary(salary_field, SortDirection.ASC), label="Salary: Low to High")
        )
        self.register(
            SortSpec("alphabetical", SortDirection.ASC, by_text(title_field), label="Title A-Z")
        )
        self.register(
            SortSpec("relevance", SortDirection.ASC, lambda a, b: 0, preserve_order=True,
                     label="Relevance")
        )

        if default not in self._strategies:
            raise ValueError(f"Unknown default sort strategy: {default}")

    def register(self, spec: SortSpec) -> None:
        """Add or replace a strategy."""
        self._strategies[spec.key] = spec

    def keys(self) -> List[str]:
        return list(self._strategies)

    def __contains__(self, key: str) -> bool:
        return key in self._strategies

    def get(self, key: Optional[str]) -> SortSpec:
        """
        Look up a strategy, falling back to the default for unknown keys.
        """
        if key in self._strategies:
            return self._strategies[key]
        if key:
            logger.warning(f"Unknown sort strategy '{key}', using '{self.default}'")
        return self._strategies[self.default]

    def comparator(self, key: Optional[str]) -> Comparator:
        """Total-order comparator for ``key``, including the identifier tie-break."""
        return with_tiebreak(self.get(key).compare)

    def sort(self, records: Iterable[Record], key: Optional[str]) -> List[Record]:
        """
        Return a sorted copy of ``records``.

        Args:
            records: Records to sort
            key: Strategy name

        Returns:
            New list; a permutation of the input
        """
        spec = self.get(key)
        records = list(records)
        if spec.preserve_order:
            return records
        return sorted(records, key=cmp_to_key(with_tiebreak(spec.compare)))
