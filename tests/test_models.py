"""Tests for shared models."""

import pytest

from job_portal.models import ListParams, ListResponse, Record, get_path


def test_get_path():
    data = {"jobPost": {"company": {"name": "Acme"}, "title": None}}

    assert get_path(data, "jobPost.company.name") == "Acme"
    assert get_path(data, "jobPost.title", "n/a") == "n/a"
    assert get_path(data, "jobPost.company.name.first") is None
    assert get_path(data, "missing.path", 0) == 0


class TestRecord:
    """Test wrapping API payloads."""

    def test_from_payload(self):
        record = Record.from_payload({"id": 7, "status": "Reviewed", "title": "QA"})

        assert record.id == "7"
        assert record.status == "reviewed"
        assert record.get("title") == "QA"
        assert record.get("id") == "7"

    def test_nested_identifier(self):
        """Test saved jobs are keyed by the job post id."""
        payload = {"saved_at": "2024-06-01", "jobPost": {"id": 101}}

        record = Record.from_payload(payload, id_field="jobPost.id", status_field=None)

        assert record.id == "101"
        assert record.status is None
        assert record.get("status", "none") == "none"

    def test_missing_identifier(self):
        with pytest.raises(ValueError):
            Record.from_payload({"title": "QA"})

    def test_with_status_returns_copy(self):
        record = Record(id="1", status="pending")

        updated = record.with_status("reviewed")

        assert updated.status == "reviewed"
        assert record.status == "pending"


def test_list_params_to_query():
    params = ListParams(
        page=2, limit=10, search="dev", sort="newest", filters={"status": "pending", "ids": [1, 2]}
    )

    assert params.to_query() == {
        "page": 2,
        "limit": 10,
        "search": "dev",
        "sort": "newest",
        "status": "pending",
        "ids": "1,2",
    }
    assert ListParams().to_query() == {}


def test_list_response_alias():
    response = ListResponse.model_validate({"data": [{"id": 1}], "total": 3, "totalPages": 1})

    assert response.total_pages == 1
    assert ListResponse().data == []
