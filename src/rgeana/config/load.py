"""Main configuration loading functions.

This module provides the primary entry points for loading configurations:
- load_config(): Load from a YAML string
- load_config_file(): Load from a file path
- _load_config_recursive(): Internal recursive loader with include support

A configuration file may include other files, whose content is merged
before its own. Relative include paths are resolved with respect to the
directory of the including file:

.. code-block:: yaml

    include: base.yaml
    pipeline:
      fmt_nlayers: 3
"""

import os
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .defaults import DEFAULT_CONFIG
from .errors import ConfigCycleError, ConfigIncludeError, ConfigValidationError
from .operations import apply_overrides, deep_merge, extract_includes

__all__ = ["load_config", "load_config_file"]


def _load_config_recursive(
    cfg_path: Optional[str] = None,
    config_string: Optional[str] = None,
    root_dir: Optional[str] = None,
    include_stack: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Recursively load config with cycle detection.

    Parameters
    ----------
    cfg_path : Optional[str]
        Path to configuration file (mutually exclusive with config_string)
    config_string : Optional[str]
        YAML configuration string (mutually exclusive with cfg_path)
    root_dir : Optional[str]
        Root directory for resolving relative include paths.
        Defaults to directory of cfg_path when loading from file.
    include_stack : Optional[List[str]]
        Stack of currently-loading files (for cycle detection)

    Returns
    -------
    Dict[str, Any]
        Configuration content, includes resolved

    Raises
    ------
    ConfigCycleError
        If circular include detected
    ConfigIncludeError
        If included file not found
    ValueError
        If both or neither cfg_path and config_string are provided
    """
    # Validate inputs
    if (cfg_path is None) == (config_string is None):
        raise ValueError("Must provide exactly one of cfg_path or config_string")

    # Determine the identifier for cycle detection and root directory
    if cfg_path is not None:
        cfg_path = os.path.abspath(cfg_path)
        identifier = cfg_path
        if root_dir is None:
            root_dir = os.path.dirname(cfg_path)
    else:
        identifier = "<string>"
        if root_dir is None:
            root_dir = os.getcwd()

    # Cycle detection
    include_stack = include_stack if include_stack is not None else []
    if identifier in include_stack and cfg_path is not None:
        raise ConfigCycleError(include_stack + [identifier])

    include_stack = include_stack + [identifier]

    # Load YAML
    try:
        if cfg_path is not None:
            with open(cfg_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f)
        else:
            main_config = yaml.safe_load(config_string)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {cfg_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigIncludeError(f"Error loading {identifier}: {exc}") from exc

    if main_config is None:
        return {}
    if not isinstance(main_config, dict):
        raise ConfigValidationError(
            f"Configuration {identifier} must be a mapping, got "
            f"{type(main_config).__name__}"
        )

    # Process includes, then apply the content of this file on top
    includes, cleaned_config = extract_includes(main_config)
    config = {}
    for include_file in includes:
        include_path = os.path.expandvars(os.path.expanduser(include_file))
        if not os.path.isabs(include_path):
            include_path = os.path.join(root_dir, include_path)

        included = _load_config_recursive(include_path, include_stack=include_stack)
        config = deep_merge(config, included)

    return deep_merge(config, cleaned_config)


def _finalize(config: Dict[str, Any], overrides: Optional[Iterable[str]]):
    """Merge a loaded configuration with the defaults, apply overrides.

    Parameters
    ----------
    config : Dict[str, Any]
        Loaded configuration
    overrides : Iterable[str], optional
        List of `key.path=value` overrides

    Returns
    -------
    Dict[str, Any]
        Complete configuration
    """
    unknown = set(config).difference(DEFAULT_CONFIG)
    if unknown:
        raise ConfigValidationError(
            f"Unknown configuration block(s): {sorted(unknown)}. Allowed "
            f"blocks: {list(DEFAULT_CONFIG)}"
        )

    config = deep_merge(DEFAULT_CONFIG, config)
    if overrides:
        config = apply_overrides(config, overrides)

    return config


def load_config(
    config_string: str, overrides: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Load a configuration from a YAML string.

    Parameters
    ----------
    config_string : str
        YAML configuration
    overrides : Iterable[str], optional
        List of `key.path=value` overrides

    Returns
    -------
    Dict[str, Any]
        Complete configuration, defaults filled in
    """
    config = _load_config_recursive(config_string=config_string)

    return _finalize(config, overrides)


def load_config_file(
    cfg_path: Optional[str] = None, overrides: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Load a configuration from a YAML file.

    Parameters
    ----------
    cfg_path : str, optional
        Path to the configuration file. If not provided, only the defaults
        and the overrides are used.
    overrides : Iterable[str], optional
        List of `key.path=value` overrides

    Returns
    -------
    Dict[str, Any]
        Complete configuration, defaults filled in
    """
    config = {}
    if cfg_path is not None:
        config = _load_config_recursive(cfg_path=cfg_path)

    return _finalize(config, overrides)
