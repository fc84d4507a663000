"""
Template Splicer — Replace marker-bounded regions of the target document.

A region is bounded by a marker pair::

    <!--CI_TBODY-->
    ...replaced on every run...
    <!--/CI_TBODY-->

Everything outside the markers, and the markers themselves, are preserved.
Each marker must appear exactly once, start before end. A missing, duplicated
or inverted pair for a product is fatal. The LAST_UPDATED pair is optional and
skipped only when neither of its markers appears; a partial or duplicated
LAST_UPDATED pair is fatal like any other.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Optional

from dateutil import tz

from ..validation import ConfigurationError, TemplateError

logger = logging.getLogger(__name__)

LAST_UPDATED_MARKER = "LAST_UPDATED"
TIMESTAMP_FORMAT = "%d %b %Y, %H:%M %Z"


def marker_pair(marker: str) -> tuple:
    return f"<!--{marker}-->", f"<!--/{marker}-->"


def find_region(document: str, marker: str) -> Optional[tuple]:
    """Return (start, end) offsets of the region body, or None if unusable."""
    start_marker, end_marker = marker_pair(marker)
    if document.count(start_marker) != 1 or document.count(end_marker) != 1:
        return None
    start = document.find(start_marker)
    end = document.find(end_marker)
    if end < start:
        return None
    return start + len(start_marker), end


def has_region(document: str, marker: str) -> bool:
    return find_region(document, marker) is not None


def replace_between(document: str, marker: str, replacement: str) -> str:
    """
    Substitute the body of a marker region.

    Raises:
        TemplateError: If either marker is absent or repeated, or the end
            precedes the start
    """
    region = find_region(document, marker)
    if region is None:
        raise TemplateError(marker)
    body_start, body_end = region
    return document[:body_start] + "\n" + replacement + "\n" + document[body_end:]


def resolve_timezone(name: str) -> tzinfo:
    """Look up a civil time zone by IANA name."""
    zone = tz.gettz(name)
    if zone is None:
        raise ConfigurationError(f"Unknown timezone: {name}")
    return zone


def format_timestamp(now: datetime, zone: tzinfo) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(zone).strftime(TIMESTAMP_FORMAT)


def stamp_last_updated(document: str, now: datetime, zone: tzinfo) -> str:
    """Write a human-readable timestamp into the LAST_UPDATED region, if any."""
    if not any(m in document for m in marker_pair(LAST_UPDATED_MARKER)):
        logger.debug("No LAST_UPDATED markers in document, skipping timestamp")
        return document
    return replace_between(document, LAST_UPDATED_MARKER, format_timestamp(now, zone))


def write_if_changed(path: Path, original: str, updated: str) -> bool:
    """
    Write the document back only when its content changed.

    Uses atomic write (write to temp, then rename).

    Returns:
        True if the file was rewritten
    """
    if updated == original:
        return False

    path = Path(path)
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        temp_path.write_text(updated, encoding="utf-8")
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    logger.info(f"Document written: {path.name}")
    return True
