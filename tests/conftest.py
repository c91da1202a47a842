"""Shared fixtures for list-view tests."""

import asyncio
from datetime import datetime, timezone

import pytest

from job_portal.api.base import RecordsAPI
from job_portal.errors import APIError
from job_portal.filters.dates import RelativeDateClassifier
from job_portal.models import Record

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def application(app_id, title, company, status, applied_at, salary, job_type="full-time",
                location="Ho Chi Minh City"):
    """Application payload shaped like the history endpoint returns it."""
    return {
        "id": app_id,
        "status": status,
        "applied_at": applied_at,
        "jobPost": {
            "id": 100 + app_id,
            "title": title,
            "salary_range": salary,
            "job_type": job_type,
            "location": location,
            "company": {"name": company},
        },
    }


APPLICATIONS = [
    application(1, "Backend Engineer", "Acme", "pending", "2024-06-15T08:00:00Z",
                "$50,000 - $70,000"),
    application(2, "Frontend Developer", "Globex", "reviewed", "2024-06-13T12:00:00Z",
                "40.000.000 VND", job_type="part-time", location="Hanoi"),
    application(3, "Data Engineer", "Initech", "pending", "2024-06-10T09:30:00Z",
                "Negotiable", location="Remote"),
    application(4, "Product Manager", "Acme", "shortlisted", "2024-06-01T10:00:00Z",
                "$90,000", job_type="contract"),
    application(5, "QA Engineer", "Umbrella", "rejected", "2024-04-01T10:00:00Z",
                "$45,000", location="Da Nang"),
]


class FakeRecordsAPI(RecordsAPI):
    """In-memory collaborator recording every call."""

    def __init__(self, payloads=None):
        self.payloads = list(APPLICATIONS if payloads is None else payloads)
        self.total = None
        self.total_pages = None
        self.list_calls = []
        self.status_calls = []
        self.remove_calls = []
        self.fail_list = False
        self.fail_status = False
        self.fail_remove = False
        self.status_gate = None

    async def list(self, params):
        self.list_calls.append(params)
        if self.fail_list:
            raise APIError("Service unavailable", 503)
        response = {"data": list(self.payloads)}
        if self.total is not None:
            response["total"] = self.total
        if self.total_pages is not None:
            response["totalPages"] = self.total_pages
        return response

    async def update_status(self, record_id, status):
        self.status_calls.append((record_id, status))
        if self.status_gate is not None:
            await self.status_gate.wait()
        if self.fail_status:
            return {"success": False, "message": "Application not found"}
        return {"success": True}

    async def remove_record(self, record_id):
        self.remove_calls.append(record_id)
        if self.fail_remove:
            raise APIError("Forbidden", 403)
        self.payloads = [p for p in self.payloads if str(p["id"]) != record_id]
        return {"success": True}


class GatedListAPI(RecordsAPI):
    """Collaborator whose list calls block until released, to interleave fetches."""

    def __init__(self):
        self.pending = []

    def respond_with(self, response):
        """Queue a response; returns the event that releases it."""
        gate = asyncio.Event()
        self.pending.append((gate, response))
        return gate

    async def list(self, params):
        gate, response = self.pending.pop(0)
        await gate.wait()
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def applications():
    """Five application payloads with mixed statuses, dates and salaries."""
    return [dict(p) for p in APPLICATIONS]


@pytest.fixture
def records(applications):
    """The same applications wrapped as Records."""
    return [Record.from_payload(p) for p in applications]


@pytest.fixture
def classifier():
    """Date classifier pinned to 2024-06-15 12:00 UTC."""
    return RelativeDateClassifier(now=NOW)


@pytest.fixture
def fake_api():
    return FakeRecordsAPI()


@pytest.fixture
def gated_api():
    return GatedListAPI()


@pytest.fixture
def api_factory():
    """Build a FakeRecordsAPI over custom payloads."""
    return FakeRecordsAPI
