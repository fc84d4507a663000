"""
Tests for the project-clause rewrite.
"""

import pytest

from release_board.jira.jql import rewrite_project_clause


class TestRewriteProjectClause:
    """The rewrite handles exactly one pattern and leaves everything else alone."""

    @pytest.mark.parametrize("jql", [
        'project = "Core Installer"',
        'project="Core Installer"',
        'project  =  "Core Installer"',
        'PROJECT = "Core Installer"',
    ])
    def test_quoted_name_becomes_key(self, jql):
        assert rewrite_project_clause(jql, "CI") == "project = CI"

    def test_rest_of_query_untouched(self):
        jql = 'project = "Core Installer" AND fixVersion is not EMPTY ORDER BY created DESC'
        assert rewrite_project_clause(jql, "CI") == (
            "project = CI AND fixVersion is not EMPTY ORDER BY created DESC"
        )

    @pytest.mark.parametrize("jql", [
        "project = CI",
        "project in (CI, AB)",
        "project = 'Core Installer'",
        'summary ~ "project"',
        'subproject = "Core"',
    ])
    def test_non_matching_queries_are_noops(self, jql):
        assert rewrite_project_clause(jql, "CI") == jql

    def test_empty_key_is_noop(self):
        jql = 'project = "Core Installer"'
        assert rewrite_project_clause(jql, "") == jql

    def test_key_with_backslash_is_literal(self):
        assert rewrite_project_clause('project = "X"', r"A\1") == r"project = A\1"
