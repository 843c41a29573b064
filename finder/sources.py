"""
Source tuning loaded from config/sources.yaml.

Holds the freelancer tab names and the Streamtime search views with their
page sizes and caps. The file is optional; defaults mirror production.

Usage:
    from finder.sources import load_sources

    sources = load_sources()
    sources.relations["jobs"].max_total  # 2000
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from . import config
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SOURCES_PATH = Path(__file__).parent.parent / "config" / "sources.yaml"

DEFAULT_FREELANCER_TABS = [
    "Creative Directors",
    "AD/Designers",
    "Copywriters",
    "Animators",
    "3D Artists",
    "Developers",
    "Producers/AM",
    "Retouchers",
    "Photographer/Videographers",
    "Strategists",
    "Specialists",
]


class RelationSettings(BaseModel):
    """Paging settings for one Streamtime search view."""

    search_view: int = Field(ge=1)
    page_size: int = Field(default=200, ge=1)
    max_total: int = Field(default=2000, ge=1)

    @model_validator(mode="after")
    def _cap_covers_one_page(self):
        if self.max_total < self.page_size:
            raise ValueError("max_total must be >= page_size")
        return self


def _default_relations() -> dict[str, RelationSettings]:
    return {
        "jobs": RelationSettings(search_view=7, page_size=200, max_total=2000),
        "job_items": RelationSettings(search_view=16, page_size=200, max_total=5000),
        "job_item_users": RelationSettings(search_view=17, page_size=200, max_total=5000),
    }


class SourcesConfig(BaseModel):
    """Validated contents of sources.yaml."""

    freelancer_tabs: list[str] = Field(default_factory=lambda: list(DEFAULT_FREELANCER_TABS))
    team_range: str = "A1:Z"
    relations: dict[str, RelationSettings] = Field(default_factory=_default_relations)

    @model_validator(mode="after")
    def _require_relations(self):
        missing = {"jobs", "job_items", "job_item_users"} - set(self.relations)
        if missing:
            raise ValueError(f"relations missing: {', '.join(sorted(missing))}")
        return self


def load_sources(path: str | None = None) -> SourcesConfig:
    """
    Load sources.yaml, falling back to defaults when the file is absent.

    Raises:
        ConfigError if the file exists but is not valid YAML or fails validation.
    """
    config_path = Path(path or config.SOURCES_CONFIG_PATH or DEFAULT_SOURCES_PATH)
    if not config_path.exists():
        logger.info(f"No sources config at {config_path}, using defaults")
        return SourcesConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    try:
        return SourcesConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid sources config {config_path}: {e}") from e
