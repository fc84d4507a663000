"""
Build Pipeline — Fetch, render, and splice every product into the page.

Each build:
1. Reads the target document once
2. For each product, in configured order:
   a. Fetches its issues from Jira
   b. Renders them into table rows
   c. Splices the rows between the product's markers
3. Stamps the LAST_UPDATED region (if the profile asks for it)
4. Writes the document back only if it changed

Any failure aborts the whole build before anything is written; there is no
per-product isolation.

## Build ID Format

    B-{YYYYMMDD}T{HHMMSS}-{RANDOM}
    Example: B-20261019T140500-3F9A1C

## Usage

    from release_board.pipeline import run_build

    result = run_build(config, credentials, Path("index.html"))
    if result.written:
        print("index.html updated")
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional
from uuid import uuid4

from .config.loader import JiraCredentials
from .config.models import BoardConfig, ProductSpec
from .jira.client import JiraClient
from .jira.jql import rewrite_project_clause
from .site.render import render_rows
from .site.splicer import replace_between, resolve_timezone, stamp_last_updated, write_if_changed
from .validation import ConfigurationError, RemoteError

logger = logging.getLogger(__name__)


@dataclass
class ProductResult:
    """Outcome of one product's fetch/render/splice."""

    key: str
    name: str
    issue_count: int = 0
    jql_sent: str = ""


@dataclass
class BuildResult:
    """Result of a build run."""

    build_id: str
    started_at: str
    ended_at: Optional[str] = None
    duration_ms: int = 0

    products: List[ProductResult] = field(default_factory=list)
    stamped: bool = False
    changed: bool = False
    written: bool = False
    dry_run: bool = False

    document: str = ""

    @property
    def row_counts(self) -> Dict[str, int]:
        return {p.key: p.issue_count for p in self.products}


def generate_build_id() -> str:
    """Generate a unique build ID."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    suffix = uuid4().hex[:6].upper()
    return f"B-{ts}-{suffix}"


def query_for(product: ProductSpec, config: BoardConfig) -> str:
    """The JQL actually sent for a product under the active profile."""
    if config.profile.rewrites_project_clause:
        return rewrite_project_clause(product.jql, product.key)
    return product.jql


def splice_product(
    document: str,
    product: ProductSpec,
    client: JiraClient,
    config: BoardConfig,
) -> tuple:
    """
    Fetch, render and splice a single product.

    Returns:
        (new_document, ProductResult)
    """
    jql = query_for(product, config)
    extra = {"product_key": product.key}

    logger.debug(f"Fetching {product.key}: {jql}", extra=extra)
    try:
        issues = client.search(jql, config.max_results)
    except RemoteError as e:
        raise e.for_product(product.key) from e

    rows = render_rows(
        issues,
        config.profile,
        base_url=config.base_url,
        release_dates=config.get_release_dates(),
    )
    document = replace_between(document, product.tbody_marker, rows)

    logger.info(f"Rendered {len(issues)} rows for {product.name}", extra=extra)
    return document, ProductResult(
        key=product.key,
        name=product.name,
        issue_count=len(issues),
        jql_sent=jql,
    )


def run_build(
    config: BoardConfig,
    credentials: JiraCredentials,
    template_path: Path,
    client: Optional[JiraClient] = None,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> BuildResult:
    """
    Execute a full build against the target document.

    Args:
        config: Loaded board configuration
        credentials: Jira credentials for Basic auth
        template_path: The HTML document holding the marker regions
        client: Pre-built Jira client (optional; one is created otherwise)
        now: Override timestamp for the LAST_UPDATED stamp (optional)
        dry_run: If True, render but never write

    Returns:
        BuildResult with per-product counts and write status

    Raises:
        BoardError: Any configuration, remote or template failure
    """
    start_time = time.time()
    build_id = generate_build_id()

    if now is None:
        now = datetime.now(timezone.utc)

    result = BuildResult(
        build_id=build_id,
        started_at=now.isoformat().replace("+00:00", "Z"),
        dry_run=dry_run,
    )

    logger.info(
        f"Starting build {build_id}: {len(config.products)} products, "
        f"profile={config.profile.name}",
        extra={"build_id": build_id},
    )

    # Zone must resolve before the first request
    zone = resolve_timezone(config.timezone) if config.profile.stamps_last_updated else None

    template_path = Path(template_path)
    if not template_path.exists():
        raise ConfigurationError("Missing template file", path=template_path)
    try:
        original = template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read template file: {e}", path=template_path)
    document = original

    owns_client = client is None
    if client is None:
        client = JiraClient(config.base_url, credentials)

    try:
        for product in config.products:
            document, product_result = splice_product(document, product, client, config)
            result.products.append(product_result)
    finally:
        if owns_client:
            client.close()

    if zone is not None:
        stamped = stamp_last_updated(document, now, zone)
        result.stamped = stamped != document
        document = stamped

    result.document = document
    result.changed = document != original

    if result.changed and not dry_run:
        result.written = write_if_changed(template_path, original, document)

    result.ended_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    result.duration_ms = int((time.time() - start_time) * 1000)

    logger.info(
        f"Build {build_id} finished: changed={result.changed}, "
        f"written={result.written} ({result.duration_ms}ms)",
        extra={"build_id": build_id},
    )
    return result
