"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "postmatter"
    content_dir:      str = Field(default="content", description="Collection root used when no path is given")
    delimiter:        str = Field(default="keep", pattern=r"^(\+\+\+|---|keep)$", description="Delimiter fmt writes; keep = each document's own")
    missing_metadata: str = Field(default="error", pattern="^(error|body)$", description="error, or treat whole text as body")
    unknown_keys:     str = Field(default="ignore", pattern="^(ignore|preserve|error)$", description="Policy for unrecognized keys")
    outline_preset:   str = Field(default="commonmark", pattern="^(commonmark|default|zero|js-default|gfm-like)$", description="MarkdownIt parser preset name")
    log_level:        str = Field(default="ERROR", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    def policies(self) -> dict[str, str]:
        """Loader keyword arguments derived from these settings."""
        return {"missing_metadata": self.missing_metadata, "unknown_keys": self.unknown_keys}


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTMATTER_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"POSTMATTER_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
