"""
CLI build commands — render Jira results into the release page.

Usage:
    python -m release_board.main build [--config PATH] [--template PATH] [--dry-run]
    python -m release_board.main render-preview --product KEY
"""

from __future__ import annotations

import click


@click.command("build")
@click.option("--config", "config_file", default="config/jql.json", help="Path to the board config")
@click.option("--template", "template_file", default="index.html", help="HTML document with marker regions")
@click.option("--dry-run", is_flag=True, help="Render everything but don't write the document")
@click.pass_context
def build(ctx: click.Context, config_file: str, template_file: str, dry_run: bool) -> None:
    """Fetch every product from Jira and splice the rows into the page."""
    from ..config.loader import load_board_config, load_credentials
    from ..pipeline import run_build

    root = ctx.obj["root"]
    template_path = root / template_file

    credentials = load_credentials()
    config = load_board_config(root / config_file)

    result = run_build(config, credentials, template_path, dry_run=dry_run)

    for product in result.products:
        click.echo(f"Rendered {product.issue_count} rows for {product.name}")

    if result.written:
        click.secho(f"✓ {template_path.name} updated from Jira", fg="green")
    elif result.changed and dry_run:
        click.secho(f"(Dry run — {template_path.name} would change, not written)", fg="cyan")
    else:
        click.echo(f"No changes to {template_path.name}")


@click.command("render-preview")
@click.option("--product", "product_key", required=True, help="Product key from the config")
@click.option("--config", "config_file", default="config/jql.json", help="Path to the board config")
@click.pass_context
def render_preview(ctx: click.Context, product_key: str, config_file: str) -> None:
    """Print one product's rendered rows without touching the page."""
    from ..config.loader import load_board_config, load_credentials
    from ..jira.client import JiraClient
    from ..pipeline import query_for
    from ..site.render import render_rows
    from ..validation import ConfigurationError

    root = ctx.obj["root"]
    credentials = load_credentials()
    config = load_board_config(root / config_file)

    product = config.get_product(product_key)
    if product is None:
        raise ConfigurationError(f"Unknown product key: {product_key}")

    jql = query_for(product, config)
    click.echo(f"JQL: {jql}", err=True)

    with JiraClient(config.base_url, credentials) as client:
        issues = client.search(jql, config.max_results)

    click.echo(render_rows(
        issues,
        config.profile,
        base_url=config.base_url,
        release_dates=config.get_release_dates(),
    ))
