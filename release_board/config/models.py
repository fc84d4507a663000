"""
Config Models — Pydantic schemas for the board configuration document.

The document (``config/jql.json``) describes:
- baseUrl: Jira site root
- maxResults: result cap per product query
- profile: how rows are rendered (generic or specialized)
- releaseDates: operator-maintained version -> date label table
- products: ordered list of tracked queries
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MAX_RESULTS = 100

# Used by the specialized profile when the document carries no table.
DEFAULT_RELEASE_DATES: Dict[str, str] = {
    "10.11.003": "06th March",
}


class ProductSpec(BaseModel):
    """One tracked project/query bound to a marker pair."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    tbody_marker: str = Field(alias="tbodyMarker", min_length=1)
    jql: str = Field(min_length=1)

    @property
    def start_marker(self) -> str:
        return f"<!--{self.tbody_marker}-->"

    @property
    def end_marker(self) -> str:
        return f"<!--/{self.tbody_marker}-->"


class RenderProfile(BaseModel):
    """Per-deployment rendering policy."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = "generic"  # "generic" or "specialized"
    release_type_label: str = Field(default="Differential", alias="releaseTypeLabel")
    date_placeholder: str = Field(default="TBD", alias="datePlaceholder")
    stamp_last_updated: Optional[bool] = Field(default=None, alias="stampLastUpdated")
    rewrite_project_clause: Optional[bool] = Field(default=None, alias="rewriteProjectClause")

    @field_validator("name")
    @classmethod
    def _known_profile(cls, value: str) -> str:
        if value not in ("generic", "specialized"):
            raise ValueError(f"unknown profile '{value}' (expected generic or specialized)")
        return value

    @property
    def is_specialized(self) -> bool:
        return self.name == "specialized"

    @property
    def column_count(self) -> int:
        return 4 if self.is_specialized else 6

    @property
    def stamps_last_updated(self) -> bool:
        if self.stamp_last_updated is None:
            return self.is_specialized
        return self.stamp_last_updated

    @property
    def rewrites_project_clause(self) -> bool:
        if self.rewrite_project_clause is None:
            return self.is_specialized
        return self.rewrite_project_clause


class BoardConfig(BaseModel):
    """The config/jql.json schema."""

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(alias="baseUrl", min_length=1)
    max_results: Optional[int] = Field(default=DEFAULT_MAX_RESULTS, alias="maxResults")
    profile: RenderProfile = Field(default_factory=RenderProfile)
    timezone: str = "UTC"
    release_dates: Optional[Dict[str, str]] = Field(default=None, alias="releaseDates")
    products: List[ProductSpec] = Field(min_length=1)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("max_results", mode="before")
    @classmethod
    def _default_when_falsy(cls, value):
        return value or DEFAULT_MAX_RESULTS

    @field_validator("profile", mode="before")
    @classmethod
    def _profile_from_name(cls, value):
        # "profile": "specialized" is shorthand for {"name": "specialized"}
        if isinstance(value, str):
            return {"name": value}
        return value

    def get_release_dates(self) -> Dict[str, str]:
        """Version -> date table; falls back to the built-in table."""
        if self.release_dates is not None:
            return self.release_dates
        return dict(DEFAULT_RELEASE_DATES)

    def get_product(self, key: str) -> Optional[ProductSpec]:
        for product in self.products:
            if product.key == key:
                return product
        return None
