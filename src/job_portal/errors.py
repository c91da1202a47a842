"""
Failure taxonomy for the list-view engine.

Network and server failures are raised by the API layer as ``APIError`` and
translated into one of the typed ``ListViewError`` subclasses at the boundary
where the asynchronous operation was started. The controller hands those back
inside result objects; nothing raises past it.
"""

from dataclasses import dataclass
from typing import Optional


class ConfigError(Exception):
    """Configuration file missing, unreadable or invalid."""


class APIError(Exception):
    """
    Non-success response from the portal REST API.

    Raised for HTTP error statuses, ``{"success": false}`` bodies and
    transport errors (connection refused, timeout).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ListViewError(Exception):
    """Base class for failures surfaced to the presentation layer."""

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.record_id = record_id


class FetchFailure(ListViewError):
    """List retrieval failed. The last good records stay visible; retryable."""


class UpdateFailed(ListViewError):
    """A status transition was rejected or the PATCH call failed."""


class TransitionRejected(UpdateFailed):
    """The transition table does not allow the requested change."""


class RemovalFailed(ListViewError):
    """Delete/unfollow call failed; the record was restored."""


@dataclass
class OperationResult:
    """Outcome of an asynchronous list-view operation."""

    ok: bool
    error: Optional[ListViewError] = None


@dataclass
class FetchResult(OperationResult):
    """Result of a fetch. ``applied`` is False when a newer fetch superseded it."""

    applied: bool = True


@dataclass
class TransitionResult(OperationResult):
    """Result of a status transition; ``status`` is the committed status afterwards."""

    record_id: str = ""
    status: Optional[str] = None


@dataclass
class RemovalResult(OperationResult):
    """Result of removing a record from the list."""

    record_id: str = ""
