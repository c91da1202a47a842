"""
Pydantic models shared by the list-view engine.

The API returns loosely structured JSON (job posts, saved-job entries,
applications, followed companies). Each payload is wrapped in a ``Record``
carrying a stable identifier and, for workflow entities, the status.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplicationStatus(str, Enum):
    """
    Status of a job application.

    Two vocabularies are in use: employer screens use SHORTLISTED, the admin
    console uses ACCEPTED. Which one applies is decided by the workflow table.
    """

    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


_MISSING = object()


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """
    Read a dotted path (``jobPost.company.name``) out of nested dicts.

    Returns ``default`` when any segment is missing or not a mapping.
    """
    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(part, _MISSING)
        if current is _MISSING or current is None:
            return default
    return current


class Record(BaseModel):
    """
    One row of a list view.

    ``data`` is the opaque API payload. ``status`` mirrors the payload's
    status field for workflow entities so optimistic updates never have to
    rewrite nested payloads.
    """

    id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    status: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Read a field by dotted path.

        ``id`` and ``status`` resolve to the record attributes, everything
        else is looked up in the payload.
        """
        if path == "id":
            return self.id
        if path == "status":
            return self.status if self.status is not None else default
        return get_path(self.data, path, default)

    def with_status(self, status: Optional[str]) -> "Record":
        """Return a copy showing ``status``."""
        return self.model_copy(update={"status": status})

    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        id_field: str = "id",
        status_field: Optional[str] = "status",
    ) -> "Record":
        """
        Wrap an API payload.

        Args:
            payload: Raw JSON object from the API
            id_field: Dotted path of the stable identifier
            status_field: Dotted path of the workflow status, or None

        Raises:
            ValueError: If the payload has no identifier
        """
        record_id = get_path(payload, id_field)
        if record_id is None or record_id == "":
            raise ValueError(f"Payload has no identifier at '{id_field}'")

        status = get_path(payload, status_field) if status_field else None
        return cls(
            id=str(record_id),
            data=payload,
            status=str(status).lower() if status is not None else None,
        )


class ListParams(BaseModel):
    """
    Request parameters for a list endpoint.

    Endpoints that return the whole collection get no page/limit.
    """

    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)
    sort: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        """Flatten into query-string parameters, dropping empty values."""
        query: Dict[str, Any] = {}
        if self.page is not None:
            query["page"] = self.page
        if self.limit is not None:
            query["limit"] = self.limit
        if self.search:
            query["search"] = self.search
        if self.sort:
            query["sort"] = self.sort
        for key, value in self.filters.items():
            if isinstance(value, (list, tuple)):
                query[key] = ",".join(str(v) for v in value)
            else:
                query[key] = value
        return query


class ListResponse(BaseModel):
    """
    Normalized list response.

    ``total``/``total_pages`` are only present on server-paginated endpoints.
    """

    data: List[Dict[str, Any]] = Field(default_factory=list)
    total: Optional[int] = None
    total_pages: Optional[int] = Field(default=None, alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)
