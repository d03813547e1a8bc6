"""Configuration for the publish checker."""

from publish_checker.config.checker_config import (
    CheckerConfig,
    DetectionSettings,
    ExplorationSettings,
    TransportSettings,
    load_checker_config,
)

__all__ = [
    "CheckerConfig",
    "DetectionSettings",
    "ExplorationSettings",
    "TransportSettings",
    "load_checker_config",
]
