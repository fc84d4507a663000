"""
Release Board — CLI Entry Point

Usage:
    python -m release_board.main build [--dry-run]
    python -m release_board.main check-config
    python -m release_board.main render-preview --product KEY
"""

from __future__ import annotations

# Load .env file FIRST, before any other imports that might read env vars
from pathlib import Path
from dotenv import load_dotenv

_project_root = Path(__file__).parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import sys

import click

from .cli.build import build, render_preview
from .cli.config import check_config
from .logging_config import setup_logging
from .validation import BoardError

setup_logging()


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


class BoardGroup(click.Group):
    """Click group that turns fatal build errors into a clean exit 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except BoardError as e:
            click.secho(f"✗ {e}", fg="red", err=True)
            sys.exit(1)


@click.group(cls=BoardGroup)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Release Board — Jira-driven release tables for a static page."""
    ctx.ensure_object(dict)
    ctx.obj["root"] = get_project_root()


cli.add_command(build)
cli.add_command(render_preview)
cli.add_command(check_config)


if __name__ == "__main__":
    cli()
