"""Record filtering: search, facets and the helpers they rely on."""

from job_portal.filters.dates import DateBucket, RelativeDateClassifier, parse_timestamp
from job_portal.filters.facets import (
    FacetDefinition,
    date_bucket_facet,
    enum_facet,
    numeric_range_facet,
    search_facet,
    text_facet,
)
from job_portal.filters.filter_engine import FacetFilterChain
from job_portal.filters.models import FacetKind, FacetSpec, FilterRejection, FilterResult
from job_portal.filters.salary import SalaryParser, parse_salary
from job_portal.filters.search import SearchIndexer

__all__ = [
    "DateBucket",
    "RelativeDateClassifier",
    "parse_timestamp",
    "FacetDefinition",
    "FacetFilterChain",
    "FacetKind",
    "FacetSpec",
    "FilterRejection",
    "FilterResult",
    "SalaryParser",
    "SearchIndexer",
    "date_bucket_facet",
    "enum_facet",
    "numeric_range_facet",
    "parse_salary",
    "search_facet",
    "text_facet",
]
