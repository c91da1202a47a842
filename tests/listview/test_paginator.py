"""Tests for page windows."""

import pytest

from job_portal.listview.paginator import PageWindow, PaginationMode, Paginator, count_pages


def test_count_pages():
    assert count_pages(0, 10) == 0
    assert count_pages(1, 10) == 1
    assert count_pages(10, 10) == 1
    assert count_pages(11, 10) == 2


class TestPageWindow:
    """Test window construction."""

    def test_page_index_clamped(self):
        """Test out-of-range pages are clamped into range."""
        assert PageWindow.create(page_index=5, page_size=10, total_count=12).page_index == 2
        assert PageWindow.create(page_index=0, page_size=10, total_count=12).page_index == 1

    def test_empty_list_stays_on_page_one(self):
        """Test zero records means zero pages, shown as page 1."""
        window = PageWindow.create(page_index=3, page_size=10, total_count=0)

        assert window.page_index == 1
        assert window.total_pages == 0
        assert window.has_next is False
        assert window.has_prev is False

    def test_offsets(self):
        window = PageWindow.create(page_index=2, page_size=3, total_count=5)

        assert window.start_index == 3
        assert window.end_index == 5
        assert window.has_prev is True
        assert window.has_next is False

    def test_rejects_bad_page_size(self):
        with pytest.raises(ValueError):
            PageWindow.create(page_size=0)


class TestPaginator:
    """Test navigation and reconciliation."""

    def test_navigation_is_clamped(self):
        """Test next/previous stop at the ends."""
        paginator = Paginator(page_size=3)
        window = paginator.reconcile(paginator.first(), total_count=5)

        second = paginator.next(window)
        assert second.page_index == 2
        assert paginator.next(second).page_index == 2
        assert paginator.previous(window).page_index == 1
        assert paginator.go_to(window, 99).page_index == 2

    def test_client_slices(self):
        """Test newest-first page 1 of size 3 shows the first three."""
        paginator = Paginator(page_size=3, mode=PaginationMode.CLIENT)
        items = ["a", "b", "c", "d", "e"]
        window = paginator.reconcile(paginator.first(), total_count=len(items))

        assert paginator.window(window, items) == ["a", "b", "c"]
        assert paginator.window(paginator.next(window), items) == ["d", "e"]

    def test_server_mode_returns_page_unchanged(self):
        paginator = Paginator(page_size=3, mode="server")
        window = PageWindow.create(page_index=2, page_size=3, total_count=9)

        assert paginator.window(window, ["x", "y", "z"]) == ["x", "y", "z"]

    def test_reconcile_shrinks_past_last_page(self):
        """Test a shrinking result set pulls the page back into range."""
        paginator = Paginator(page_size=10)
        window = PageWindow.create(page_index=3, page_size=10, total_count=30)

        assert paginator.reconcile(window, total_count=12).page_index == 2
        assert paginator.reconcile(window, total_count=0).page_index == 1

    def test_reconcile_with_only_page_count(self):
        """Test the total is estimated when the server reports pages only."""
        paginator = Paginator(page_size=10, mode="server")
        window = PageWindow.create(page_index=3, page_size=10, total_count=30)

        result = paginator.reconcile(window, total_pages=3, fetched_count=4)

        assert result.total_count == 24
        assert result.total_pages == 3
        assert result.page_index == 3

    def test_server_page_count_wins(self):
        """Test the server's totalPages is trusted over the computed one."""
        paginator = Paginator(page_size=10, mode="server")

        result = paginator.reconcile(paginator.first(), total_count=25, total_pages=4)

        assert result.total_pages == 4

    def test_request_params(self):
        paginator = Paginator(page_size=20)
        window = PageWindow.create(page_index=2, page_size=20, total_count=100)

        assert paginator.request_params(window) == {"page": 2, "limit": 20}
