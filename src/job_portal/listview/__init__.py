"""List screens: sorting, paging, view state and the controller driving them."""

from job_portal.listview.controller import ListViewController, Notification
from job_portal.listview.debounce import DEFAULT_DEBOUNCE_SECONDS, Debouncer
from job_portal.listview.paginator import PageWindow, PaginationMode, Paginator
from job_portal.listview.sorting import ComparatorRegistry, SortDirection, SortSpec
from job_portal.listview.state import ViewState
from job_portal.listview.stats import calculate_stats, count_applied_filters, status_percentage

__all__ = [
    "ComparatorRegistry",
    "DEFAULT_DEBOUNCE_SECONDS",
    "Debouncer",
    "ListViewController",
    "Notification",
    "PageWindow",
    "PaginationMode",
    "Paginator",
    "SortDirection",
    "SortSpec",
    "ViewState",
    "calculate_stats",
    "count_applied_filters",
    "status_percentage",
]
