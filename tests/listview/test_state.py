"""Tests for view-state reducers."""

import pytest

from job_portal.errors import FetchFailure
from job_portal.listview import state as reducers
from job_portal.listview.paginator import PageWindow
from job_portal.listview.state import ViewState


@pytest.fixture
def loaded(records):
    """State on page 3 of a 25-record list."""
    window = PageWindow.create(page_index=3, page_size=10, total_count=25)
    return ViewState(view="applications", sort="newest", window=window, records=tuple(records))


def test_criteria_changes_reset_to_first_page(loaded):
    """Test query, facet, sort and reset go back to page 1."""
    assert reducers.set_query(loaded, "eng").window.page_index == 1
    assert reducers.set_facet(loaded, "status", "pending").window.page_index == 1
    assert reducers.set_sort(loaded, "oldest").window.page_index == 1

    reset = reducers.reset_filters(
        reducers.set_query(loaded, "eng"), {"status": "all"}, "newest"
    )
    assert reset.query == ""
    assert reset.facets == {"status": "all"}
    assert reset.window.page_index == 1


def test_reducers_do_not_mutate(loaded):
    updated = reducers.set_facet(loaded, "status", "pending")

    assert loaded.facets == {}
    assert updated.facets == {"status": "pending"}


def test_fetch_failed_keeps_records(loaded):
    """Test the last good records stay visible after a failure."""
    started = reducers.fetch_started(loaded, 4)
    failed = reducers.fetch_failed(started, FetchFailure("boom"))

    assert failed.loading is False
    assert failed.error.message == "boom"
    assert failed.records == loaded.records
    assert failed.generation == 4


def test_fetch_succeeded_clears_error(loaded, records):
    failed = reducers.fetch_failed(loaded, FetchFailure("boom"))
    window = PageWindow.create(page_size=10, total_count=2)

    result = reducers.fetch_succeeded(failed, records[:2], window)

    assert result.error is None
    assert [r.id for r in result.records] == ["1", "2"]


def test_remove_and_insert_restore_position(loaded):
    """Test a restored record returns to its original index."""
    removed = reducers.remove_record(loaded, "3")
    assert removed.index_of("3") == -1

    restored = reducers.insert_record(removed, loaded.find("3"), 2)

    assert [r.id for r in restored.records] == ["1", "2", "3", "4", "5"]


def test_insert_clamps_index(loaded):
    record = loaded.find("5")
    removed = reducers.remove_record(loaded, "5")

    assert reducers.insert_record(removed, record, 99).records[-1].id == "5"


def test_replace_status(loaded):
    updated = reducers.replace_status(loaded, "1", "reviewed")

    assert updated.find("1").status == "reviewed"
    assert loaded.find("1").status == "pending"
