"""
Validation — Error taxonomy for the release board build.

Every error here is fatal for a build run. The CLI catches ``BoardError``
and exits non-zero with the message, which always names the failing
input (file path, product key, or marker name).

## Usage

    from release_board.validation import BoardError

    try:
        run_build(config, credentials, template_path)
    except BoardError as e:
        print(f"Build failed: {e}")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


class BoardError(Exception):
    """Base class for all fatal build errors."""


class ConfigurationError(BoardError):
    """Raised when the configuration document is missing or invalid."""

    def __init__(self, message: str, path: Optional[Path] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.path = path
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class CredentialsError(BoardError):
    """Raised when required secrets are absent from the environment."""

    def __init__(self, missing: list):
        self.missing = list(missing)
        super().__init__(f"Missing {' or '.join(self.missing)} env vars")


class RemoteError(BoardError):
    """Raised when the Jira search endpoint does not answer with 2xx."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        product_key: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.product_key = product_key
        super().__init__(message)

    def for_product(self, product_key: str) -> "RemoteError":
        """Return a copy of this error tagged with the product it belongs to."""
        return RemoteError(
            f"[{product_key}] {self}",
            status_code=self.status_code,
            body=self.body,
            product_key=product_key,
        )


class TemplateError(BoardError):
    """Raised when a marker pair is absent or out of order."""

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(f"Markers not found: <!--{marker}-->")
