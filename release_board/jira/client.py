"""
Jira Search Client — One authenticated GET per product query.

## Request

    GET {baseUrl}/rest/api/3/search/jql?maxResults={N}&jql={encoded}
    Accept: application/json
    Authorization: Basic base64(email:token)

## Response

    {"issues": [{"key": "CI-12", "fields": {...}}, ...]}

A non-2xx answer is fatal: the body is captured into the raised
RemoteError and nothing is retried.

## Environment Variables

- JIRA_TIMEOUT_SECONDS: Request timeout (default: 30)
"""

from __future__ import annotations

import base64
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..config.loader import JiraCredentials
from ..validation import ConfigurationError, RemoteError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/rest/api/3/search/jql"
TIMEOUT_VAR = "JIRA_TIMEOUT_SECONDS"

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def basic_auth_header(email: str, api_token: str) -> str:
    """Build the Authorization header value for Basic auth."""
    raw = f"{email}:{api_token}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def build_search_url(base_url: str, jql: str, max_results: int) -> str:
    """Build the search URL with the query percent-encoded."""
    encoded = quote(jql, safe=_URI_COMPONENT_SAFE)
    return f"{base_url.rstrip('/')}{SEARCH_PATH}?maxResults={max_results}&jql={encoded}"


def resolve_timeout(default: float) -> float:
    """Request timeout in seconds, overridable via JIRA_TIMEOUT_SECONDS."""
    raw = os.environ.get(TIMEOUT_VAR) or default
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{TIMEOUT_VAR} must be a number of seconds, got {raw!r}")
    if not timeout > 0:
        raise ConfigurationError(f"{TIMEOUT_VAR} must be positive, got {raw!r}")
    return timeout


def _extract_issues(response: httpx.Response) -> List[Dict[str, Any]]:
    """Pull the issues list out of a search response, defaulting to empty."""
    try:
        data = response.json()
    except ValueError:
        logger.warning("Jira response was not JSON; treating as zero issues")
        return []

    if not isinstance(data, dict):
        return []

    issues = data.get("issues")
    if not isinstance(issues, list):
        return []
    return [issue for issue in issues if isinstance(issue, dict)]


class JiraClient:
    """
    Minimal client for the Jira Cloud JQL search endpoint.

    Holds a single httpx.Client for the whole run; close() it (or use
    the client as a context manager) when the run is done.
    """

    def __init__(
        self,
        base_url: str,
        credentials: JiraCredentials,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = resolve_timeout(timeout)
        self._headers = {
            "Accept": "application/json",
            "Authorization": basic_auth_header(credentials.email, credentials.api_token),
        }
        self._client = httpx.Client(timeout=self.timeout, transport=transport)

    def search(self, jql: str, max_results: int) -> List[Dict[str, Any]]:
        """
        Run one JQL search and return the issue records.

        Raises:
            RemoteError: On transport failure or any non-2xx status
        """
        url = build_search_url(self.base_url, jql, max_results)
        logger.debug(f"GET {url}")

        try:
            response = self._client.get(url, headers=self._headers)
        except httpx.TimeoutException:
            raise RemoteError(f"Jira API request timed out after {self.timeout}s")
        except httpx.RequestError as e:
            raise RemoteError(f"Jira API request failed: {e}")

        if not response.is_success:
            body = response.text
            raise RemoteError(
                f"Jira API error {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        return _extract_issues(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
