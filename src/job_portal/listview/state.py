"""
View state of one list screen.

``ViewState`` is immutable. Every change goes through one of the reducer
functions below, which return a new state; the controller owns the current
value and publishes it to subscribers.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from job_portal.errors import ListViewError
from job_portal.listview.paginator import PageWindow
from job_portal.models import Record


@dataclass(frozen=True)
class ViewState:
    """
    Snapshot of a list view.

    Attributes:
        view: Screen name
        query: Search text as typed
        facets: Current facet values by key
        sort: Sort strategy key
        window: Current page window
        records: In-memory record set from the last successful fetch
        visible: Records on the current page, filtered and sorted
        filtered_count: Records passing search and facets
        loading: A fetch is in flight
        error: Last fetch failure, cleared by the next successful fetch
        stats: Per-status counts over the in-memory set
        applied_filters: Number of non-default facets (search not counted)
        generation: Number of the most recent fetch
    """

    view: str
    sort: str
    window: PageWindow
    query: str = ""
    facets: Mapping[str, Any] = field(default_factory=dict)
    records: Tuple[Record, ...] = ()
    visible: Tuple[Record, ...] = ()
    filtered_count: int = 0
    loading: bool = False
    error: Optional[ListViewError] = None
    stats: Mapping[str, int] = field(default_factory=dict)
    applied_filters: int = 0
    generation: int = 0

    def find(self, record_id: str) -> Optional[Record]:
        """Record with ``record_id`` from the in-memory set."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def index_of(self, record_id: str) -> int:
        """Position of ``record_id`` in the in-memory set, or -1."""
        for index, record in enumerate(self.records):
            if record.id == record_id:
                return index
        return -1


def set_query(state: ViewState, query: str) -> ViewState:
    """New search text; back to the first page."""
    return replace(state, query=query or "", window=_first_page(state.window))


def set_facet(state: ViewState, key: str, value: Any) -> ViewState:
    """New facet value; back to the first page."""
    facets: Dict[str, Any] = dict(state.facets)
    facets[key] = value
    return replace(state, facets=facets, window=_first_page(state.window))


def reset_filters(state: ViewState, defaults: Mapping[str, Any], sort: str) -> ViewState:
    """Clear search, facets and sort back to their defaults."""
    return replace(
        state, query="", facets=dict(defaults), sort=sort, window=_first_page(state.window)
    )


def set_sort(state: ViewState, sort: str) -> ViewState:
    """New sort strategy; back to the first page."""
    return replace(state, sort=sort, window=_first_page(state.window))


def set_window(state: ViewState, window: PageWindow) -> ViewState:
    return replace(state, window=window)


def fetch_started(state: ViewState, generation: int) -> ViewState:
    return replace(state, loading=True, generation=generation)


def fetch_succeeded(state: ViewState, records: Iterable[Record], window: PageWindow) -> ViewState:
    """Replace the in-memory set with freshly fetched records."""
    return replace(state, records=tuple(records), window=window, loading=False, error=None)


def fetch_failed(state: ViewState, error: ListViewError) -> ViewState:
    """Keep the last good records and remember the failure."""
    return replace(state, loading=False, error=error)


def set_records(state: ViewState, records: Iterable[Record]) -> ViewState:
    """Replace the in-memory set after a local change (removal, status)."""
    return replace(state, records=tuple(records))


def remove_record(state: ViewState, record_id: str) -> ViewState:
    return set_records(state, (r for r in state.records if r.id != record_id))


def insert_record(state: ViewState, record: Record, index: int) -> ViewState:
    """Put ``record`` back at ``index`` (clamped to the current length)."""
    records = [r for r in state.records if r.id != record.id]
    index = min(max(index, 0), len(records))
    records.insert(index, record)
    return set_records(state, records)


def replace_status(state: ViewState, record_id: str, status: Optional[str]) -> ViewState:
    """Show ``status`` on one record."""
    return set_records(
        state,
        (r.with_status(status) if r.id == record_id else r for r in state.records),
    )


def computed(
    state: ViewState,
    visible: Iterable[Record],
    filtered_count: int,
    window: PageWindow,
    stats: Mapping[str, int],
    applied_filters: int,
) -> ViewState:
    """Store the output of the filter/sort/page pipeline."""
    return replace(
        state,
        visible=tuple(visible),
        filtered_count=filtered_count,
        window=window,
        stats=dict(stats),
        applied_filters=applied_filters,
    )


def _first_page(window: PageWindow) -> PageWindow:
    return PageWindow.create(
        page_index=1,
        page_size=window.page_size,
        total_count=window.total_count,
        total_pages=window.total_pages,
    )
