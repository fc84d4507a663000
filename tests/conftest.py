"""
Shared fixtures for release board tests.

Provides a temporary project root with a config document and a target
page, plus helpers for building Jira issue records and mock transports so
no test touches the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, List, Optional

import httpx
import pytest

from release_board.config.loader import JiraCredentials


TEMPLATE = """<html>
<body>
<p>Updated: <!--LAST_UPDATED-->never<!--/LAST_UPDATED--></p>
<table><tbody>
<!--CI_TBODY-->
<tr><td>old</td></tr>
<!--/CI_TBODY-->
</tbody></table>
<footer>keep me</footer>
</body>
</html>
"""


def make_issue(
    key: str = "CI-1",
    version: Optional[str] = "1.0.0",
    category: str = "To Do",
    issue_type: str = "Release",
    duedate: Optional[str] = None,
    updated: Optional[str] = None,
) -> dict:
    """Build a Jira issue record shaped like the search API returns."""
    fields: dict = {
        "issuetype": {"name": issue_type},
        "status": {"name": category, "statusCategory": {"name": category}},
        "fixVersions": [{"name": version, "id": "10001"}] if version else [],
    }
    if duedate:
        fields["duedate"] = duedate
    if updated:
        fields["updated"] = updated
    return {"key": key, "fields": fields}


def issues_transport(issues_by_project: dict, requests: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    """
    Mock transport answering every search with a fixed issue list.

    ``issues_by_project`` maps a substring of the JQL to the issues to
    return; "*" matches anything.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        jql = request.url.params.get("jql", "")
        for needle, issues in issues_by_project.items():
            if needle == "*" or needle in jql:
                return httpx.Response(200, json={"issues": issues})
        return httpx.Response(200, json={"issues": []})

    return httpx.MockTransport(handler)


def status_transport(status_code: int, body: str) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, text=body))


@pytest.fixture
def credentials() -> JiraCredentials:
    return JiraCredentials(email="ops@example.com", api_token="secret-token")


@pytest.fixture
def config_data() -> dict:
    """Minimal valid configuration document."""
    return {
        "baseUrl": "https://example.atlassian.net/",
        "maxResults": 50,
        "products": [
            {
                "key": "CI",
                "name": "Core Installer",
                "tbodyMarker": "CI_TBODY",
                "jql": "project=CI",
            },
        ],
    }


@pytest.fixture
def project_root(tmp_path: Path, config_data: dict) -> Path:
    """Temp project with config/jql.json and index.html."""
    (tmp_path / "config").mkdir()
    write_config(tmp_path / "config" / "jql.json", config_data)
    (tmp_path / "index.html").write_text(TEMPLATE, encoding="utf-8")
    return tmp_path


def write_config(path: Path, data: dict) -> Path:
    """Helper to write a config JSON file."""
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
