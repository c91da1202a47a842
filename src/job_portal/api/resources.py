"""
Portal endpoints behind each list screen.

Each resource maps the three collaborator operations (list, update status,
remove) onto REST paths. Paths are class defaults and can be overridden per
instance, e.g. from config.
"""

import logging
from typing import Any, Dict, Optional

from job_portal.api.base import RecordsAPI
from job_portal.api.client import PortalClient
from job_portal.models import ListParams

logger = logging.getLogger(__name__)

# Keys under which the portal returns the record array, by endpoint family
_DATA_KEYS = ("data", "applications", "jobs", "jobPosts", "companies")


def normalize_list_response(body: Any) -> Dict[str, Any]:
    """
    Bring the various list payload shapes into ``{data, total, totalPages}``.

    Handles bare arrays, ``{"applications": [...]}`` style keys and totals
    nested under ``pagination``.
    """
    if isinstance(body, list):
        return {"data": body}

    if not isinstance(body, dict):
        return {"data": []}

    data = []
    for key in _DATA_KEYS:
        value = body.get(key)
        if isinstance(value, list):
            data = value
            break
        if isinstance(value, dict) and isinstance(value.get("items"), list):
            data = value["items"]
            break

    pagination = body.get("pagination") if isinstance(body.get("pagination"), dict) else {}
    result: Dict[str, Any] = {"data": data}

    total = body.get("total", pagination.get("total"))
    total_pages = body.get("totalPages", pagination.get("totalPages"))
    if total is not None:
        result["total"] = int(total)
    if total_pages is not None:
        result["totalPages"] = int(total_pages)
    return result


class PortalResource(RecordsAPI):
    """
    Generic REST-backed list resource.

    Paths may contain ``{id}``, which is replaced by the record identifier.
    A resource without ``status_path`` / ``remove_path`` rejects those
    operations with APIError.
    """

    list_path: str = ""
    status_path: Optional[str] = None
    remove_path: Optional[str] = None

    def __init__(
        self,
        client: PortalClient,
        list_path: Optional[str] = None,
        status_path: Optional[str] = None,
        remove_path: Optional[str] = None,
        extra_params: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize resource.

        Args:
            client: HTTP client
            list_path: Override of the list endpoint
            status_path: Override of the status endpoint
            remove_path: Override of the removal endpoint
            extra_params: Query parameters sent with every list request
        """
        self.client = client
        if list_path:
            self.list_path = list_path
        if status_path:
            self.status_path = status_path
        if remove_path:
            self.remove_path = remove_path
        self.extra_params = dict(extra_params or {})

        if not self.list_path:
            raise ValueError(f"{type(self).__name__} needs a list_path")

    def list(self, params: ListParams) -> Dict[str, Any]:
        query = {**self.extra_params, **params.to_query()}
        body = self.client.get(self.list_path, params=query)
        response = normalize_list_response(body)
        logger.debug(
            f"{type(self).__name__}: fetched {len(response['data'])} records "
            f"(page={params.page}, total={response.get('total')})"
        )
        return response

    def update_status(self, record_id: str, status: str) -> Dict[str, Any]:
        if not self.status_path:
            return super().update_status(record_id, status)
        return self.client.patch(self.status_path.format(id=record_id), json={"status": status})

    def remove_record(self, record_id: str) -> Dict[str, Any]:
        if not self.remove_path:
            return super().remove_record(record_id)
        return self.client.delete(self.remove_path.format(id=record_id))


class ApplicationsAPI(PortalResource):
    """Job applications: jobseeker history and employer applicant lists."""

    list_path = "/api/employer/application/job-posts/applications"
    status_path = "/api/applications/{id}/status"
    remove_path = "/api/applications/{id}"

    @classmethod
    def for_jobseeker(cls, client: PortalClient, jobseeker_id: str) -> "ApplicationsAPI":
        """Application history of one jobseeker; ``remove`` withdraws."""
        return cls(
            client,
            list_path=f"/api/jobseeker/applications/history-applications/{jobseeker_id}",
        )

    @classmethod
    def for_employer(
        cls, client: PortalClient, job_post_id: Optional[str] = None
    ) -> "ApplicationsAPI":
        """Applicants across the employer's posts, or for a single post."""
        extra = {"job_post_id": job_post_id} if job_post_id else None
        return cls(
            client,
            status_path="/api/employer/application/applications/{id}/status",
            extra_params=extra,
        )


class JobsAPI(PortalResource):
    """Public job search. Read-only and server-paginated."""

    list_path = "/api/jobseeker/job-posts/search"


class SavedJobsAPI(PortalResource):
    """Jobs bookmarked by the signed-in jobseeker. Records are keyed by job post id."""

    list_path = "/api/jobseeker/saved/jobs"
    remove_path = "/api/jobseeker/saved/jobs/{id}"


class FollowedCompaniesAPI(PortalResource):
    """Companies followed by the signed-in jobseeker."""

    list_path = "/api/jobseeker/company/companies"
    remove_path = "/api/jobseeker/company/unfollow-company/{id}"


RESOURCES = {
    "applications": ApplicationsAPI,
    "jobs": JobsAPI,
    "saved_jobs": SavedJobsAPI,
    "followed_companies": FollowedCompaniesAPI,
}
