"""Application configuration: parsing options, settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


CONFIG_FILE = "config.yaml"

EXTENSIONS = frozenset({"autolink", "strikethrough", "tagfilter", "tasklist", "table"})


class ParsingOptions(BaseModel):
    """Fixed configuration for the Markdown compiler and the HTML tree parser."""
    model_config = ConfigDict(frozen=True)

    extensions:        frozenset[str] = EXTENSIONS
    recover:           bool = True      # lenient recovery from malformed markup
    no_network:        bool = True
    remove_blank_text: bool = True
    compact:           bool = True
    max_depth:         int = Field(default=256, ge=1, description="Deepest element nesting accepted")

    @field_validator("extensions")
    @classmethod
    def _known_extensions(cls, value: frozenset[str]) -> frozenset[str]:
        unknown = value - EXTENSIONS
        if unknown:
            raise ValueError(f"Unknown extensions: {', '.join(sorted(unknown))}")
        return value


DEFAULT_OPTIONS = ParsingOptions()


class Settings(BaseModel):
    app_name:      str = "mdtree"
    output_dir:    str = Field(default="dist", description="Directory for exported AST files")
    output_format: str = Field(default="json", pattern="^(json|yaml)$", description="json or yaml")
    extensions:    list[str] = Field(default_factory=lambda: sorted(EXTENSIONS), description="Markdown extensions")
    max_depth:     int = Field(default=256, ge=1, description="Deepest element nesting accepted")

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    def parsing_options(self) -> ParsingOptions:
        """Build the immutable ParsingOptions these settings describe."""
        return ParsingOptions(extensions=frozenset(self.extensions), max_depth=self.max_depth)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDTREE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDTREE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
