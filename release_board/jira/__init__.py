"""
Jira Module — Issue search client and JQL helpers.
"""

from .client import JiraClient, basic_auth_header, build_search_url
from .jql import rewrite_project_clause

__all__ = [
    "JiraClient",
    "basic_auth_header",
    "build_search_url",
    "rewrite_project_clause",
]
