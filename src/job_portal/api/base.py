"""Collaborator contract for list endpoints."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from job_portal.errors import APIError
from job_portal.models import ListParams


class RecordsAPI(ABC):
    """
    Abstract base class for list-view data sources.

    Standard list response structure:
    {
        "data": List[dict],     # Records of the requested page (or all of them)
        "total": int,           # Total matching records (server-paginated only)
        "totalPages": int,      # Page count (server-paginated only)
    }

    Mutations answer ``{"success": bool, "message": str}``.
    Implementations raise ``APIError`` for any non-success outcome.
    """

    @abstractmethod
    def list(self, params: ListParams) -> Dict[str, Any]:
        """
        Fetch records.

        Args:
            params: Page, limit, search, filters and sort to send

        Returns:
            List response dictionary
        """
        pass

    def update_status(self, record_id: str, status: str) -> Dict[str, Any]:
        """Change the workflow status of a record."""
        raise APIError(f"{type(self).__name__} does not support status updates")

    def remove_record(self, record_id: str) -> Dict[str, Any]:
        """Remove a record (withdraw, unsave, unfollow)."""
        raise APIError(f"{type(self).__name__} does not support removal")


async def invoke(func: Callable[..., Any], *args: Any) -> Any:
    """
    Call a collaborator method without blocking the event loop.

    Coroutine functions are awaited; plain functions (the ``requests``
    based client) run in a worker thread.
    """
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    result = await asyncio.to_thread(func, *args)
    if inspect.isawaitable(result):
        return await result
    return result


def ensure_success(response: Any) -> Any:
    """
    Raise APIError if ``response`` is a ``{"success": false}`` body.

    Returns:
        The response unchanged
    """
    if isinstance(response, dict) and response.get("success") is False:
        raise APIError(response.get("message") or "Request was not successful")
    return response
