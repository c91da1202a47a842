"""
Page-window bookkeeping.

Server-paginated endpoints (job search, admin lists) already return one
page, so the paginator only computes request parameters and reconciles the
window against the reported totals. Endpoints that return the whole
collection (saved jobs, application history) are sliced locally.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaginationMode(str, Enum):
    CLIENT = "client"
    SERVER = "server"


def count_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count > 0 else 0


class PageWindow(BaseModel):
    """
    The page currently shown.

    ``page_index`` is 1-based and always within ``[1, max(total_pages, 1)]``.
    An empty list has zero pages and stays on page 1.
    """

    page_index: int = 1
    page_size: int = 10
    total_count: int = 0
    total_pages: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        page_index: int = 1,
        page_size: int = 10,
        total_count: int = 0,
        total_pages: Optional[int] = None,
    ) -> "PageWindow":
        """Build a window, deriving total_pages and clamping page_index."""
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        total_count = max(total_count, 0)
        if total_pages is None:
            total_pages = count_pages(total_count, page_size)
        total_pages = max(total_pages, 0)
        page_index = min(max(page_index, 1), max(total_pages, 1))
        return cls(
            page_index=page_index,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
        )

    @property
    def start_index(self) -> int:
        """Offset of the first record of the page (0-based)."""
        return (self.page_index - 1) * self.page_size

    @property
    def end_index(self) -> int:
        """Offset one past the last record of the page."""
        return min(self.start_index + self.page_size, self.total_count)

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page_index > 1


class Paginator:
    """
    Navigation and reconciliation of page windows.

    Windows are immutable; every operation returns a new one.
    """

    def __init__(self, page_size: int = 10, mode: PaginationMode = PaginationMode.CLIENT):
        """
        Initialize paginator.

        Args:
            page_size: Records per page
            mode: CLIENT slices locally, SERVER trusts the fetched page
        """
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size
        self.mode = PaginationMode(mode)

    def first(self) -> PageWindow:
        return PageWindow.create(page_index=1, page_size=self.page_size)

    def go_to(self, window: PageWindow, page_index: int) -> PageWindow:
        """Move to ``page_index``, clamped into range."""
        return PageWindow.create(
            page_index=page_index,
            page_size=window.page_size,
            total_count=window.total_count,
            total_pages=window.total_pages,
        )

    def next(self, window: PageWindow) -> PageWindow:
        """Next page; stays on the last page."""
        return self.go_to(window, window.page_index + 1)

    def previous(self, window: PageWindow) -> PageWindow:
        """Previous page; stays on page 1."""
        return self.go_to(window, window.page_index - 1)

    def request_params(self, window: PageWindow) -> Dict[str, Any]:
        """Parameters the fetch layer sends for this window."""
        return {"page": window.page_index, "limit": window.page_size}

    def reconcile(
        self,
        window: PageWindow,
        total_count: Optional[int] = None,
        total_pages: Optional[int] = None,
        fetched_count: int = 0,
    ) -> PageWindow:
        """
        Rebuild the window after a fetch or a local change in record count.

        Args:
            window: Window the data was requested for
            total_count: Total reported by the server, or the local filtered count
            total_pages: Page count reported by the server, if any
            fetched_count: Number of records received, used when no total is reported

        Returns:
            Window with totals updated and page_index clamped
        """
        if total_count is None:
            if total_pages is not None:
                # Only a page count was reported; count what is known so far
                total_count = (window.page_index - 1) * window.page_size + fetched_count
            else:
                total_count = fetched_count

        if total_pages is not None and total_pages != count_pages(total_count, window.page_size):
            logger.debug(
                f"Server reported {total_pages} pages for {total_count} records "
                f"(page size {window.page_size}); using server value"
            )

        return PageWindow.create(
            page_index=window.page_index,
            page_size=window.page_size,
            total_count=total_count,
            total_pages=total_pages,
        )

    def window(self, window: PageWindow, items: Sequence[T]) -> List[T]:
        """
        Records visible in ``window``.

        In SERVER mode ``items`` already is the requested page and is
        returned unchanged.
        """
        if self.mode == PaginationMode.SERVER:
            return list(items)
        return list(items[window.start_index:window.start_index + window.page_size])
