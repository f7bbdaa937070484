"""Configuration loading system.

This package provides:
- YAML file loading with hierarchical includes and cycle detection
- Dot-notation overrides (`key.path=value`)
- Defaults for every configuration block
- A validated, immutable pipeline configuration

Main Entry Point
----------------
load_config_file : Load a configuration file, merged with the defaults
"""

from .defaults import DEFAULT_CONFIG
from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigPathError,
    ConfigTypeError,
    ConfigValidationError,
)
from .load import load_config, load_config_file
from .pipeline import PipelineConfig

__all__ = [
    "load_config",
    "load_config_file",
    "DEFAULT_CONFIG",
    "PipelineConfig",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigPathError",
    "ConfigTypeError",
    "ConfigValidationError",
]
