"""Portal REST API collaborators."""

from job_portal.api.base import RecordsAPI, ensure_success, invoke
from job_portal.api.client import PortalClient
from job_portal.api.resources import (
    RESOURCES,
    ApplicationsAPI,
    FollowedCompaniesAPI,
    JobsAPI,
    PortalResource,
    SavedJobsAPI,
    normalize_list_response,
)

__all__ = [
    "RecordsAPI",
    "PortalClient",
    "PortalResource",
    "ApplicationsAPI",
    "JobsAPI",
    "SavedJobsAPI",
    "FollowedCompaniesAPI",
    "RESOURCES",
    "ensure_success",
    "invoke",
    "normalize_list_response",
]
