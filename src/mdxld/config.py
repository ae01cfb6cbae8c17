"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from mdxld.core.models import Mode


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDXLD_"


class Settings(BaseModel):
    mode:             Mode = Field(default=Mode.expanded, description="expanded lifts $id/$type/$context; flat keeps them")
    parser_preset:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    base_url:         Optional[str] = Field(default=None, description="Base URL for resolving relative link targets")
    internal_only:    bool = Field(default=False, description="Keep only relationships to the base URL's host")
    include_images:   bool = True
    include_imports:  bool = True
    include_embeds:   bool = True
    include_mentions: bool = True
    db_url:           str = "sqlite:///mdxld.db"
    log_level:        str = Field(default="INFO", pattern="^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")

    def extract_options(self) -> dict[str, Any]:
        """Keyword arguments for extract_relationships."""
        return {
            "base_url":         self.base_url,
            "internal_only":    self.internal_only,
            "include_images":   self.include_images,
            "include_imports":  self.include_imports,
            "include_embeds":   self.include_embeds,
            "include_mentions": self.include_mentions,
            "preset":           self.parser_preset,
        }


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDXLD_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid settings: {e}") from e
