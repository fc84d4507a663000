"""
Config Loader — Load the board configuration and Jira credentials.

Two inputs:
1. The configuration document (JSON, or YAML when the suffix says so)
2. The Jira credentials from the process environment

## Usage

    from release_board.config.loader import load_board_config, load_credentials

    config = load_board_config(Path("config/jql.json"))
    creds = load_credentials()

Both raise on any problem; there is no partially defaulted configuration.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..validation import ConfigurationError, CredentialsError
from .models import BoardConfig

logger = logging.getLogger(__name__)

EMAIL_VAR = "JIRA_EMAIL"
TOKEN_VAR = "JIRA_API_TOKEN"


@dataclass
class JiraCredentials:
    """Operator credentials for Basic auth."""

    email: str
    api_token: str

    def __repr__(self) -> str:
        return f"JiraCredentials(email={self.email!r}, api_token='***')"


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> JiraCredentials:
    """
    Read JIRA_EMAIL and JIRA_API_TOKEN from the environment.

    Raises:
        CredentialsError: If either variable is unset or empty
    """
    env = os.environ if environ is None else environ
    email = env.get(EMAIL_VAR, "")
    token = env.get(TOKEN_VAR, "")

    missing = [name for name, value in ((EMAIL_VAR, email), (TOKEN_VAR, token)) if not value]
    if missing:
        raise CredentialsError(missing)

    return JiraCredentials(email=email, api_token=token)


def read_config_document(path: Path) -> Dict[str, Any]:
    """Parse the raw config document without validating its shape."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError("Missing config file", path=path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file: {e}", path=path)

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Config file is not parsable: {e}", path=path)

    if not isinstance(data, dict):
        raise ConfigurationError("Config document must be an object", path=path)

    return data


def _describe_validation_error(data: Dict[str, Any], error: ValidationError) -> str:
    """Turn pydantic errors into one line naming the failing field or product."""
    products = data.get("products") if isinstance(data.get("products"), list) else []
    parts = []
    for err in error.errors():
        loc = list(err.get("loc", ()))
        if loc and loc[0] == "baseUrl" and err.get("type") == "missing":
            parts.append('missing "baseUrl"')
            continue
        if loc and loc[0] == "products" and len(loc) >= 2 and isinstance(loc[1], int):
            index = loc[1]
            entry = products[index] if index < len(products) else {}
            label = entry.get("key") if isinstance(entry, dict) and entry.get("key") else f"#{index}"
            field_name = ".".join(str(p) for p in loc[2:]) or "entry"
            parts.append(f"product {label}: {field_name} {err.get('msg', 'invalid')}")
            continue
        field_name = ".".join(str(p) for p in loc) or "document"
        parts.append(f"{field_name}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def load_board_config(path: Path) -> BoardConfig:
    """
    Load and validate the configuration document.

    Args:
        path: Path to config/jql.json (or a .yaml equivalent)

    Returns:
        Validated BoardConfig

    Raises:
        ConfigurationError: If the file is missing, unparsable, has no
            baseUrl, has no products, or a product is incomplete
    """
    path = Path(path)
    data = read_config_document(path)

    products = data.get("products")
    if not isinstance(products, list) or not products:
        raise ConfigurationError('missing a non-empty "products" list', path=path)

    try:
        config = BoardConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(data, e), path=path)

    logger.debug(
        f"Config loaded: {len(config.products)} products, "
        f"profile={config.profile.name}, maxResults={config.max_results}"
    )
    return config
