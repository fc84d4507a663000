"""
JQL helpers — narrow text substitutions on operator-supplied queries.

This is not a JQL parser. The only supported rewrite is::

    project = "Some Name"   ->   project = KEY

Quoted project names are ambiguous for Jira when the display name and the
key differ, so the specialized profile sends the key instead. Anything
that does not match the pattern is returned untouched.
"""

from __future__ import annotations

import re

PROJECT_CLAUSE = re.compile(r'\bproject\s*=\s*"[^"]*"', re.IGNORECASE)


def rewrite_project_clause(jql: str, project_key: str) -> str:
    """Replace every ``project = "Name"`` clause with ``project = KEY``."""
    if not project_key:
        return jql
    return PROJECT_CLAUSE.sub(lambda _match: f"project = {project_key}", jql)
