"""
Configuration loader for the publish checker.

Loads and validates checker_config.yaml using Pydantic models.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from publish_checker.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/checker_config.yaml"


class TransportSettings(BaseModel):
    """Connection settings for the GraphQL endpoint."""

    endpoint: str | None = None
    auth_token_env: str = "GRAPHQL_AUTH_TOKEN"
    timeout_seconds: float = Field(default=30.0, gt=0)


class ExplorationSettings(BaseModel):
    """Knobs for walking the schema type graph."""

    node_interface: str = "Node"
    excluded_types: list[str] = Field(default_factory=lambda: ["User"])
    # Ubiquitous content types treated as already expanded, unless they are the root
    default_explored_types: list[str] = Field(
        default_factory=lambda: ["Asset", "Page", "Article", "PopUp", "Link"]
    )
    ignored_fields: list[str] = Field(
        default_factory=lambda: [
            "documentInStages",
            "createdBy",
            "publishedBy",
            "updatedBy",
            "scheduledIn",
            "history",
        ]
    )
    related_field_prefix: str = "related"
    rich_text_suffix: str = "RichText"
    title_fields: list[str] = Field(default_factory=lambda: ["slug", "title", "name"])
    strict_fragments: bool = True


class DetectionSettings(BaseModel):
    """Staleness comparison settings."""

    timestamp_comparison: Literal["lexical", "parsed"] = "lexical"


class CheckerConfig(BaseModel):
    """Complete checker configuration."""

    transport: TransportSettings = Field(default_factory=TransportSettings)
    exploration: ExplorationSettings = Field(default_factory=ExplorationSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)


def load_checker_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> CheckerConfig:
    """
    Load and validate checker configuration from YAML file.

    Args:
        config_path: Path to checker_config.yaml

    Returns:
        CheckerConfig: Validated configuration

    Raises:
        ConfigError: Failed to load or validate configuration
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    try:
        config = CheckerConfig(**config_data)
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

    logger.info(
        f"Loaded checker config from {config_path} "
        f"(interface={config.exploration.node_interface}, "
        f"comparison={config.detection.timestamp_comparison})"
    )

    return config
