"""HTTP client for the job portal REST API."""

import logging
from typing import Any, Dict, Optional

import requests

from job_portal.errors import APIError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30


class PortalClient:
    """
    Thin wrapper around ``requests.Session``.

    Adds the bearer token to every request, decodes JSON and turns every
    non-success outcome into ``APIError``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, e.g. http://localhost:5000
            token: Bearer token; requests are sent unauthenticated without it
            timeout: Request timeout in seconds
            session: Session to reuse (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        """Replace (or clear) the bearer token."""
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Raises:
            APIError: On transport errors, HTTP error statuses and
                ``{"success": false}`` bodies
        """
        url = self.url(path)
        try:
            response = self.session.request(
                method, url, params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIError(f"Network error: {e}") from e

        body = self._decode(response)

        if not response.ok:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")
            raise APIError(message or response.reason or "Request failed", response.status_code)

        if isinstance(body, dict) and body.get("success") is False:
            raise APIError(body.get("message") or "Request was not successful")

        logger.debug(f"{method} {url} -> {response.status_code}")
        return body if isinstance(body, dict) else {"data": body}

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", path, params=params)

    def patch(self, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Dict[str, Any]:
        return self.request("DELETE", path)
