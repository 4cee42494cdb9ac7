"""Configuration management for the highlighter."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

HighlightMode = Literal["full-color", "low-contrast"]


class IndexConfig(BaseModel):
    """Configuration for building the text index."""

    excluded_tags: list[str] = Field(
        default_factory=lambda: ["script", "style", "noscript", "template"]
    )
    skip_hidden: bool = True


class MatchingConfig(BaseModel):
    """Configuration for locating quotations."""

    fuzzy_enabled: bool = True
    fuzzy_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    fuzzy_min_words: int = Field(default=3, ge=1)
    fuzzy_min_chars: int = Field(default=10, ge=1)
    fuzzy_max_window: int = Field(default=20, ge=1)


class HighlightConfig(BaseModel):
    """Configuration for marker presentation."""

    mode: HighlightMode = "full-color"
    marker_tag: str = "span"
    show_progress: bool = False


class TooltipConfig(BaseModel):
    """Configuration for the hover overlay."""

    hide_delay: float = Field(default=0.3, ge=0.0)  # seconds
    placement_margin: float = Field(default=10.0, ge=0.0)
    viewport_margin: float = Field(default=5.0, ge=0.0)
    max_text_length: int = Field(default=150, ge=4)
    # Used by StaticLayout when the host supplies no measurements
    overlay_width: float = Field(default=320.0, gt=0.0)
    overlay_height: float = Field(default=200.0, gt=0.0)
    viewport_width: float = Field(default=1280.0, gt=0.0)
    viewport_height: float = Field(default=800.0, gt=0.0)


class OutputConfig(BaseModel):
    """Configuration for report output."""

    format: Literal["csv", "json"] = "csv"
    include_text: bool = True


class Config(BaseModel):
    """Main configuration for the highlighter."""

    input_path: Optional[Path] = None
    spans_path: Optional[Path] = None
    output_path: Optional[Path] = None
    report_path: Optional[Path] = None
    region_selector: str = "body"

    index: IndexConfig = Field(default_factory=IndexConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    tooltip: TooltipConfig = Field(default_factory=TooltipConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_path", "spans_path", "output_path", "report_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def load_config(config_path: Optional[str | Path] = None) -> Config:
    """
    Load highlighter configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, looks for highlighter.yaml
            in the current directory.

    Returns:
        Config object

    Raises:
        FileNotFoundError: If the config file does not exist
    """
    if config_path is None:
        config_path = Path("highlighter.yaml")
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    return Config.from_yaml(config_path)


def get_default_config() -> Config:
    """Get the default configuration."""
    return Config()
