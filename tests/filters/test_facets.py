"""Tests for facet builders and configured facet definitions."""

import pytest

from job_portal.filters.facets import (
    FacetDefinition,
    date_bucket_facet,
    enum_facet,
    numeric_range_facet,
    search_facet,
    text_facet,
)
from job_portal.filters.models import FacetKind
from job_portal.filters.salary import SalaryParser
from job_portal.filters.search import SearchIndexer


def ids(records, facet):
    return [r.id for r in records if facet(r)]


class TestEnumFacet:
    """Test categorical facets."""

    def test_match_all_is_inactive(self):
        """Test the "all" value drops the facet."""
        assert enum_facet("status", "status", "all") is None
        assert enum_facet("status", "status", "ALL") is None
        assert enum_facet("status", "status", None) is None

    def test_filters_by_status(self, records):
        """Test equality on the status field."""
        facet = enum_facet("status", "status", "pending")

        assert facet.kind == FacetKind.ENUM
        assert ids(records, facet) == ["1", "3"]

    def test_job_type_spelling_variants(self, records):
        """Test "Part Time" matches "part-time"."""
        facet = enum_facet("jobType", "jobPost.job_type", "Part Time")

        assert ids(records, facet) == ["2"]


class TestNumericRangeFacet:
    """Test salary range facets."""

    def test_open_range_is_inactive(self):
        assert numeric_range_facet("salary", "salary", None, None) is None

    def test_inclusive_bounds(self, records):
        """Test both bounds are inclusive."""
        facet = numeric_range_facet("salary", "jobPost.salary_range", 45000, 50000)

        assert "1" in ids(records, facet)
        assert "5" in ids(records, facet)
        assert "4" not in ids(records, facet)

    def test_unknown_salary_always_passes(self, records):
        """Test unpriced postings are never excluded."""
        facet = numeric_range_facet("salary", "jobPost.salary_range", 1, 2)

        assert ids(records, facet) == ["3"]

    def test_divisor_compares_in_millions(self, records):
        """Test the VND range facet compares in millions."""
        facet = numeric_range_facet(
            "salary", "jobPost.salary_range", 10, 200, SalaryParser(divisor=1_000_000)
        )

        # 40.000.000 VND is 40 million; the dollar figures are below 1 million
        assert ids(records, facet) == ["2", "3"]


class TestTextAndDateFacets:
    """Test location and date facets."""

    def test_text_substring(self, records):
        """Test case-insensitive substring on one field."""
        facet = text_facet("location", "jobPost.location", "  hanoi ")

        assert ids(records, facet) == ["2"]
        assert text_facet("location", "jobPost.location", "   ") is None

    def test_date_bucket(self, records, classifier):
        """Test the date facet uses the classifier's reference time."""
        week = date_bucket_facet("date", "applied_at", "week", classifier)
        three_days = date_bucket_facet("date", "applied_at", "THREE_DAYS", classifier)

        assert ids(records, week) == ["1", "2", "3"]
        assert ids(records, three_days) == ["1", "2"]
        assert date_bucket_facet("date", "applied_at", "all", classifier) is None

    def test_search_facet(self, records):
        """Test search wraps the indexer."""
        indexer = SearchIndexer(["jobPost.title", "jobPost.company.name"])
        facet = search_facet("engineer", indexer)

        assert facet.kind == FacetKind.SEARCH
        assert ids(records, facet) == ["1", "3", "5"]
        assert search_facet("  ", indexer) is None


class TestFacetDefinition:
    """Test facets declared in config."""

    def test_defaults_by_kind(self):
        """Test each kind has a value meaning "no filtering"."""
        salary = FacetDefinition(
            key="salary", kind="numeric_range", field="salary", bounds=[0, 200]
        )
        location = FacetDefinition(key="location", kind="text", field="location")
        status = FacetDefinition(key="status", kind="enum", field="status")

        assert salary.default_value() == [0, 200]
        assert location.default_value() == ""
        assert status.default_value() == "all"

    def test_range_at_bounds_is_inactive(self, classifier):
        """Test a range left at its full bounds does not filter."""
        definition = FacetDefinition(
            key="salary", kind="numeric_range", field="salary", bounds=[0, 200]
        )

        assert definition.is_default([0, 200]) is True
        assert definition.build([0, 200], classifier) is None
        assert definition.is_default([10, 200]) is False

    def test_build_range_with_divisor(self, records, classifier):
        """Test the configured divisor reaches the predicate."""
        definition = FacetDefinition(
            key="salary",
            kind="numeric_range",
            field="jobPost.salary_range",
            bounds=[0, 200],
            divisor=1_000_000,
        )

        facet = definition.build([30, 200], classifier)

        assert ids(records, facet) == ["2", "3"]

    def test_build_date_bucket(self, records, classifier):
        definition = FacetDefinition(key="date", kind="date_bucket", field="applied_at")

        assert ids(records, definition.build("month", classifier)) == ["1", "2", "3", "4"]

    def test_build_rejects_bad_range(self, classifier):
        """Test a range value must have two ends."""
        definition = FacetDefinition(key="salary", kind="numeric_range", field="salary")

        with pytest.raises(ValueError):
            definition.build([10], classifier)

    def test_search_kind_cannot_be_configured(self, classifier):
        """Test search is wired by the controller, not by a definition."""
        definition = FacetDefinition(key="q", kind="search", field="title")

        with pytest.raises(ValueError):
            definition.build("engineer", classifier)
