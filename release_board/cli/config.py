"""
CLI config commands — pre-flight configuration checks.

Usage:
    python -m release_board.main check-config [--config PATH] [--template PATH] [--json]
"""

from __future__ import annotations

import click


@click.command("check-config")
@click.option("--config", "config_file", default="config/jql.json", help="Path to the board config")
@click.option("--template", "template_file", default="index.html", help="HTML document with marker regions")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check_config(ctx: click.Context, config_file: str, template_file: str, as_json: bool) -> None:
    """Check credentials, config document and template markers."""
    import json as json_lib

    from ..config.validator import ConfigValidator

    root = ctx.obj["root"]
    validator = ConfigValidator(root / config_file, root / template_file)
    results = validator.validate_all()
    failed = validator.has_errors(results)

    if as_json:
        click.echo(json_lib.dumps([r.to_dict() for r in results], indent=2))
        ctx.exit(1 if failed else 0)

    click.echo("\n📋 Release Board Configuration\n")

    for check in results:
        if check.ok:
            click.secho(f"  ✓ {check.name}", fg="green", nl=False)
            click.echo(f" — {check.message}")
        else:
            color = "yellow" if check.severity == "warning" else "red"
            click.secho(f"  ✗ {check.name}", fg=color, nl=False)
            click.echo(f" — {check.message}")
            if check.guidance:
                click.echo(f"    → {check.guidance}")

    click.echo()
    problems = [r for r in results if not r.ok]
    click.secho(f"Summary: {len(results) - len(problems)} ok, {len(problems)} problems", bold=True)

    if failed:
        ctx.exit(1)
