"""
Configuration Validator — Pre-flight checks before a build.

Unlike the loader, the validator never raises: it collects every problem
so an operator can fix them in one pass.

Checks:
- Jira credentials are present in the environment
- The configuration document loads
- Every product's marker pair exists exactly once, in order, in the target document
- The LAST_UPDATED region exists when the profile stamps it (warning when
  absent, error when duplicated or unpaired)

## Usage

    from release_board.config.validator import ConfigValidator

    validator = ConfigValidator(config_path, template_path)
    for check in validator.validate_all():
        if not check.ok:
            print(f"{check.name}: {check.message}")
            print(f"  → {check.guidance}")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..site.splicer import LAST_UPDATED_MARKER, has_region, marker_pair
from ..validation import ConfigurationError
from .loader import EMAIL_VAR, TOKEN_VAR, load_board_config
from .models import BoardConfig


@dataclass
class CheckResult:
    """Outcome of a single pre-flight check."""

    name: str
    ok: bool
    message: str = ""
    guidance: Optional[str] = None
    severity: str = "error"  # "error" or "warning"

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "ok": self.ok,
            "severity": self.severity,
            "message": self.message,
            "guidance": self.guidance,
        }


CHECK_GUIDANCE = {
    "credentials": "Create an API token at https://id.atlassian.com/manage-profile/security/api-tokens "
                   f"and export {EMAIL_VAR} / {TOKEN_VAR}",
    "config": "Fix config/jql.json: it needs baseUrl and a non-empty products list",
    "markers": "Add <!--MARKER--> and <!--/MARKER--> around the product's <tbody> content",
    "last_updated": f"Add <!--{LAST_UPDATED_MARKER}--><!--/{LAST_UPDATED_MARKER}--> where the timestamp should go",
}


class ConfigValidator:
    """Collect configuration problems for the check-config command."""

    def __init__(
        self,
        config_path: Path,
        template_path: Path,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config_path = Path(config_path)
        self.template_path = Path(template_path)
        self.environ = os.environ if environ is None else environ
        self.config: Optional[BoardConfig] = None

    def check_credentials(self) -> CheckResult:
        missing = [var for var in (EMAIL_VAR, TOKEN_VAR) if not self.environ.get(var)]
        if missing:
            return CheckResult(
                name="credentials",
                ok=False,
                message=f"missing: {', '.join(missing)}",
                guidance=CHECK_GUIDANCE["credentials"],
            )
        return CheckResult(name="credentials", ok=True, message="present")

    def check_config(self) -> CheckResult:
        try:
            self.config = load_board_config(self.config_path)
        except ConfigurationError as e:
            return CheckResult(
                name="config",
                ok=False,
                message=str(e),
                guidance=CHECK_GUIDANCE["config"],
            )
        return CheckResult(
            name="config",
            ok=True,
            message=f"{len(self.config.products)} products, profile={self.config.profile.name}",
        )

    def check_markers(self) -> List[CheckResult]:
        if self.config is None:
            return []

        if not self.template_path.exists():
            return [CheckResult(
                name="template",
                ok=False,
                message=f"missing template file: {self.template_path}",
            )]

        try:
            document = self.template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return [CheckResult(
                name="template",
                ok=False,
                message=f"cannot read template file {self.template_path}: {e}",
            )]
        results = []
        for product in self.config.products:
            found = has_region(document, product.tbody_marker)
            results.append(CheckResult(
                name=f"markers:{product.key}",
                ok=found,
                message=product.tbody_marker if found else f"{product.start_marker} / {product.end_marker} missing, duplicated or out of order",
                guidance=None if found else CHECK_GUIDANCE["markers"],
            ))

        if not self.config.profile.stamps_last_updated or has_region(document, LAST_UPDATED_MARKER):
            return results

        if any(m in document for m in marker_pair(LAST_UPDATED_MARKER)):
            results.append(CheckResult(
                name="last_updated",
                ok=False,
                message="LAST_UPDATED markers duplicated, unpaired or out of order",
                guidance=CHECK_GUIDANCE["last_updated"],
            ))
        else:
            results.append(CheckResult(
                name="last_updated",
                ok=False,
                severity="warning",
                message="no LAST_UPDATED region; timestamp will be skipped",
                guidance=CHECK_GUIDANCE["last_updated"],
            ))
        return results

    def validate_all(self) -> List[CheckResult]:
        results = [self.check_credentials(), self.check_config()]
        results.extend(self.check_markers())
        return results

    def has_errors(self, results: List[CheckResult]) -> bool:
        return any(not r.ok and r.severity == "error" for r in results)

