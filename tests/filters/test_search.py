"""Tests for free-text search."""

import pytest

from job_portal.filters.search import SearchIndexer
from job_portal.models import Record


@pytest.fixture
def indexer():
    return SearchIndexer(["jobPost.title", "jobPost.company.name"])


@pytest.fixture
def record():
    return Record(
        id="1",
        data={"jobPost": {"title": "Senior Backend Engineer", "company": {"name": "Acme Corp"}}},
    )


def test_empty_query_matches_everything(indexer, record):
    """Test blank queries never filter."""
    assert indexer.matches("", record) is True
    assert indexer.matches("   ", record) is True
    assert indexer.matches(None, record) is True


def test_case_insensitive_substring(indexer, record):
    """Test the query is matched ignoring case across fields."""
    assert indexer.matches("backend", record) is True
    assert indexer.matches("  ACME ", record) is True
    assert indexer.matches("frontend", record) is False


def test_missing_fields_are_skipped(indexer):
    """Test records without the nested fields simply do not match."""
    record = Record(id="2", data={"jobPost": None})

    assert indexer.extract(record) == []
    assert indexer.matches("engineer", record) is False


def test_requires_fields():
    """Test an indexer without fields is rejected."""
    with pytest.raises(ValueError):
        SearchIndexer([])
