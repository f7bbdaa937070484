"""Operations and utilities for configuration processing.

This module contains helper functions for:
- Merging dictionaries
- Parsing values
- Setting nested values
- Applying command-line overrides
- Extracting include directives from configs
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, List, Tuple

import yaml

from .errors import ConfigIncludeError, ConfigPathError, ConfigTypeError

__all__ = [
    "deep_merge",
    "parse_value",
    "set_nested_value",
    "apply_overrides",
    "extract_includes",
]


def deep_merge(
    base_dict: Dict[str, Any], override_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Recursively merge override_dict into base_dict.

    Parameters
    ----------
    base_dict : Dict[str, Any]
        Base dictionary
    override_dict : Dict[str, Any]
        Override dictionary

    Returns
    -------
    Dict[str, Any]
        Merged dictionary (new copy)
    """
    result = deepcopy(base_dict)

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def parse_value(value_str: Any) -> Any:
    """Parse a string value into appropriate Python type.

    Parameters
    ----------
    value_str : Any
        Value to parse (if string, attempts YAML parsing)

    Returns
    -------
    Any
        Parsed value
    """
    if not isinstance(value_str, str):
        return value_str

    if value_str.strip() == "":
        return value_str

    try:
        return yaml.safe_load(value_str)
    except yaml.YAMLError:
        return value_str


def set_nested_value(
    config: Dict[str, Any], key_path: str, value: Any, only_if_exists: bool = False
) -> Tuple[Dict[str, Any], bool]:
    """Set a nested value using dot notation.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary
    key_path : str
        Dot-separated path (e.g., "pipeline.fmt_nlayers")
    value : Any
        Value to set
    only_if_exists : bool, optional
        If True, only set if parent path exists

    Returns
    -------
    Tuple[Dict[str, Any], bool]
        (modified config, whether operation was applied)

    Raises
    ------
    ConfigTypeError
        If path traverses non-dict value
    """
    keys = key_path.split(".")
    current = config

    # Navigate to parent
    for key in keys[:-1]:
        if key not in current or current[key] is None:
            if only_if_exists:
                return config, False
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ConfigTypeError(
                f"Cannot set '{key_path}': '{key}' is not a dictionary"
            )
        current = current[key]

    current[keys[-1]] = value

    return config, True


def apply_overrides(config: Dict[str, Any], overrides: Iterable[str]) -> Dict[str, Any]:
    """Apply `key.path=value` overrides, as provided on the command line.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary
    overrides : Iterable[str]
        List of `key.path=value` strings. Values are parsed as YAML.

    Returns
    -------
    Dict[str, Any]
        Modified configuration (new copy)

    Raises
    ------
    ConfigPathError
        If an override is not formatted as `key.path=value`
    """
    config = deepcopy(config)
    for override in overrides:
        key_path, sep, value = override.partition("=")
        key_path = key_path.strip()
        if not sep or not key_path:
            raise ConfigPathError(
                f"Override '{override}' must be formatted as 'key.path=value'"
            )

        config, _ = set_nested_value(config, key_path, parse_value(value))

    return config


def extract_includes(config_dict: Any) -> Tuple[List[str], Any]:
    """Extract include directives from config dict.

    Parameters
    ----------
    config_dict : Any
        Loaded YAML configuration

    Returns
    -------
    Tuple[List[str], Any]
        (includes, cleaned_config)

    Raises
    ------
    ConfigIncludeError
        If directive has invalid type
    """
    if not isinstance(config_dict, dict):
        return [], config_dict

    includes = []
    cleaned_config = {}
    for key, value in config_dict.items():
        if key == "include":
            if isinstance(value, str):
                includes.append(value)
            elif isinstance(value, list):
                includes.extend(value)
            else:
                raise ConfigIncludeError(
                    f"'include' must be a string or list of strings, got {type(value)}"
                )
        else:
            cleaned_config[key] = value

    return includes, cleaned_config
