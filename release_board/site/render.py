"""
Row Renderer — Project Jira issues into release table rows.

## Columns

generic (6):      Version | Type | Status | Release date | Notes | Action
specialized (4):  Version | Type | Status | Release date

## Status badges

    Done         -> <span class="badge released">Released</span>
    In Progress  -> <span class="badge upcoming">Upcoming</span>
    anything else -> <span class="badge planned">Planned</span>

All text taken from the API or the configuration is escaped before it is
embedded; badge markup is the only unescaped HTML in a row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config.models import RenderProfile

PLACEHOLDER = "—"
EMPTY_MESSAGE = "No matching issues."

_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"}

STATUS_BADGES: Dict[str, Tuple[str, str]] = {
    "Done": ("released", "Released"),
    "In Progress": ("upcoming", "Upcoming"),
}
DEFAULT_BADGE = ("planned", "Planned")


def escape_html(value: Any) -> str:
    """Escape & < > and double quotes. None and empty values become ''."""
    if value is None:
        return ""
    return "".join(_ESCAPES.get(ch, ch) for ch in str(value))


def status_badge(category: Optional[str]) -> Tuple[str, str]:
    """Map a status category name to (css_class, label)."""
    if not isinstance(category, str):
        return DEFAULT_BADGE
    return STATUS_BADGES.get(category, DEFAULT_BADGE)


def badge_html(category: Optional[str]) -> str:
    css_class, label = status_badge(category)
    return f'<span class="badge {css_class}">{label}</span>'


# --- Field projection ---


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


def _fields(issue: Mapping[str, Any]) -> Mapping[str, Any]:
    return _mapping(issue.get("fields"))


def issue_version(issue: Mapping[str, Any]) -> str:
    """First fix version's name (or id), else the em-dash placeholder."""
    versions = _fields(issue).get("fixVersions")
    if isinstance(versions, list) and versions and isinstance(versions[0], dict):
        first = versions[0]
        return str(first.get("name") or first.get("id") or PLACEHOLDER)
    return PLACEHOLDER


def issue_type_name(issue: Mapping[str, Any]) -> str:
    issuetype = _mapping(_fields(issue).get("issuetype"))
    return issuetype.get("name") or "Release"


def issue_status_category(issue: Mapping[str, Any]) -> str:
    status = _mapping(_fields(issue).get("status"))
    category = _mapping(status.get("statusCategory"))
    return category.get("name") or "To Do"


def issue_date(issue: Mapping[str, Any]) -> str:
    fields = _fields(issue)
    return fields.get("duedate") or fields.get("updated") or "TBD"


@dataclass(frozen=True)
class RenderedRow:
    """A row of already-escaped cell fragments."""

    cells: Tuple[str, ...]

    def to_html(self) -> str:
        inner = "\n".join(f"  <td>{cell}</td>" for cell in self.cells)
        return f"<tr>\n{inner}\n</tr>"


def render_row(
    issue: Mapping[str, Any],
    profile: RenderProfile,
    base_url: str = "",
    release_dates: Optional[Mapping[str, str]] = None,
) -> RenderedRow:
    """Render one issue according to the deployment profile."""
    version = issue_version(issue)
    badge = badge_html(issue_status_category(issue))

    if profile.is_specialized:
        dates = release_dates or {}
        release_date = dates.get(version, profile.date_placeholder)
        return RenderedRow(cells=(
            escape_html(version),
            escape_html(profile.release_type_label),
            badge,
            escape_html(release_date),
        ))

    action_url = f"{base_url}/browse/{issue.get('key', '')}"
    return RenderedRow(cells=(
        escape_html(version),
        escape_html(issue_type_name(issue)),
        badge,
        escape_html(issue_date(issue)),
        PLACEHOLDER,
        f'<a href="{escape_html(action_url)}">View</a>',
    ))


def empty_row(column_count: int) -> str:
    return f'<tr><td colspan="{column_count}">{EMPTY_MESSAGE}</td></tr>'


def render_rows(
    issues: Sequence[Mapping[str, Any]],
    profile: RenderProfile,
    base_url: str = "",
    release_dates: Optional[Mapping[str, str]] = None,
) -> str:
    """Render the full tbody block for one product."""
    if not issues:
        return empty_row(profile.column_count)

    rows: List[str] = [
        render_row(issue, profile, base_url, release_dates).to_html()
        for issue in issues
    ]
    return "\n".join(rows)
