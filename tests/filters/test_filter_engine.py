"""Tests for the facet filter chain."""

from job_portal.filters.facets import enum_facet, text_facet
from job_portal.filters.filter_engine import FacetFilterChain
from job_portal.filters.models import FilterResult


def test_no_facets_keeps_everything(records):
    """Test an empty chain returns a copy of the input."""
    chain = FacetFilterChain()

    result = chain.apply(records)

    assert result == records
    assert result is not records


def test_none_facets_are_ignored(records):
    """Test inactive facets (None) pass straight through."""
    chain = FacetFilterChain()

    result = chain.apply(records, [None, enum_facet("status", "status", "all"), None])

    assert len(result) == 5


def test_facets_are_conjunctive_and_order_preserving(records):
    """Test records must pass every facet and keep their order."""
    chain = FacetFilterChain()
    facets = [
        enum_facet("status", "status", "pending"),
        text_facet("location", "jobPost.location", "remote"),
    ]

    assert [r.id for r in chain.apply(records, facets)] == ["3"]
    assert [r.id for r in chain.apply(records, list(reversed(facets)))] == ["3"]


def test_status_filter_scenario(records):
    """Test filtering five applications by pending leaves two."""
    chain = FacetFilterChain([enum_facet("status", "status", "pending")])

    result = chain.apply(records)

    assert [r.id for r in result] == ["1", "3"]
    assert chain.passes(records[0]) is True
    assert chain.passes(records[1]) is False


def test_explain_lists_every_rejecting_facet(records):
    """Test explain does not stop at the first failing facet."""
    chain = FacetFilterChain()
    facets = [
        enum_facet("status", "status", "pending"),
        text_facet("location", "jobPost.location", "remote"),
    ]

    result = chain.explain(records[1], facets)

    assert isinstance(result, FilterResult)
    assert result.passed is False
    assert result.get_rejection_summary() == "status, location"
    assert result.to_dict()["rejections"][0]["kind"] == "enum"


def test_explain_passing_record(records):
    chain = FacetFilterChain([enum_facet("status", "status", "pending")])

    result = chain.explain(records[0])

    assert result.passed is True
    assert result.get_rejection_summary() == "No rejections"
