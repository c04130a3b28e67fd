"""
GPU Metrics Utils - Configuration Management
============================================

Configuration loading, validation, and merging utilities.

Features:
---------
1. YAML Loading
   - Load configuration from YAML files
   - Environment variable substitution (${VAR:default})

2. Validation
   - Type checking
   - Required field checking
   - Bounds validation

3. Merging
   - Override DEFAULT_CONFIG with custom configs
   - Deep merge capabilities

Configuration Structure:
-----------------------
device_name: amdgpu_metrics
source:
  path: /sys/class/drm/renderD128/device/gpu_metrics
  glob: /sys/class/drm/render*/device/gpu_metrics
refresh:
  max_age_ms: 100
per_core:
  separate: true
  device_name: cpu_thermal
layout: null
logging:
  level: INFO
  dir: logs
  console: true
  file: false

Example:
--------
>>> from utils import load_config, merge_configs, validate_config
>>>
>>> config = merge_configs(DEFAULT_CONFIG, load_config("config/default.yaml"))
>>> validate_config(config)
True

Author: Telemetry Team
Date: October 19, 2026
"""

import copy
import os
import re
from pathlib import Path
from typing import Dict, Any, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

# Longest device name accepted by hwmon-style consumers
MAX_DEVICE_NAME = 31

DEFAULT_CONFIG: Dict[str, Any] = {
    "device_name": "amdgpu_metrics",
    "source": {
        "path": "/sys/class/drm/renderD128/device/gpu_metrics",
        "glob": "/sys/class/drm/render*/device/gpu_metrics",
    },
    "refresh": {
        "max_age_ms": 100,
    },
    "per_core": {
        "separate": True,
        "device_name": "cpu_thermal",
    },
    "layout": None,
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "console": True,
        "file": False,
    },
}

_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Configuration error."""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file not found or invalid YAML

    Example:
        >>> config = load_config("config/default.yaml")
        >>> print(config["device_name"])
        'amdgpu_metrics'
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config: {e}")

    if config is None:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ConfigError(f"Config must be a mapping: {config_path}")

    config = _substitute_env_vars(config)

    logger.info(f"Loaded config from {config_path}")

    return config


def _substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in config.

    Supports format: ${VAR_NAME:default_value}
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        pattern = r'\$\{(\w+)(?::([^}]*))?\}'

        def replace_var(match):
            var_name = match.group(1)
            default = match.group(2) or ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replace_var, obj)
    else:
        return obj


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary (usually merged over DEFAULT_CONFIG)

    Returns:
        True if valid

    Raises:
        ConfigError: If validation fails
    """
    required_keys = ["device_name", "source", "refresh", "per_core"]

    for key in required_keys:
        if key not in config:
            raise ConfigError(f"Missing required key: {key}")

    _validate_device_name(config["device_name"], "device_name", allow_empty=False)
    _validate_source(config["source"])
    _validate_refresh(config["refresh"])
    _validate_per_core(config["per_core"])
    _validate_logging(config.get("logging", {}))

    layout = config.get("layout")
    if layout is not None and not isinstance(layout, str):
        raise ConfigError("layout must be a path or null")

    logger.debug("Configuration validation passed")
    return True


def _validate_device_name(name: Any, key: str, allow_empty: bool) -> None:
    if name is None and allow_empty:
        return
    if not isinstance(name, str):
        raise ConfigError(f"{key} must be a string")
    if not name and not allow_empty:
        raise ConfigError(f"{key} must not be empty")
    if len(name) > MAX_DEVICE_NAME:
        raise ConfigError(f"{key} longer than {MAX_DEVICE_NAME} characters: {name}")


def _validate_source(source: Dict[str, Any]) -> None:
    """Validate snapshot source configuration."""
    if not isinstance(source, dict):
        raise ConfigError("Source config must be a dictionary")

    path = source.get("path")
    if not isinstance(path, str) or not path:
        raise ConfigError("source.path must be a non-empty string")


def _validate_refresh(refresh: Dict[str, Any]) -> None:
    """Validate refresh interval."""
    if not isinstance(refresh, dict):
        raise ConfigError("Refresh config must be a dictionary")

    max_age = refresh.get("max_age_ms")
    if isinstance(max_age, bool) or not isinstance(max_age, (int, float)):
        raise ConfigError("refresh.max_age_ms must be numeric")
    if max_age <= 0:
        raise ConfigError("refresh.max_age_ms must be positive")


def _validate_per_core(per_core: Dict[str, Any]) -> None:
    """Validate per-core device placement."""
    if not isinstance(per_core, dict):
        raise ConfigError("per_core config must be a dictionary")

    if not isinstance(per_core.get("separate", False), bool):
        raise ConfigError("per_core.separate must be a boolean")
    _validate_device_name(per_core.get("device_name"), "per_core.device_name",
                          allow_empty=True)


def _validate_logging(logging_config: Dict[str, Any]) -> None:
    if not logging_config:
        return
    if not isinstance(logging_config, dict):
        raise ConfigError("Logging config must be a dictionary")

    level = str(logging_config.get("level", "INFO")).upper()
    if level not in _VALID_LEVELS:
        raise ConfigError(
            f"Invalid log level: {level}. Must be one of {_VALID_LEVELS}"
        )


def merge_configs(base: Dict[str, Any],
                  override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override config into base config.

    Args:
        base: Base configuration (not modified)
        override: Configuration to merge in (overrides base)

    Returns:
        Merged configuration

    Example:
        >>> config1 = {"a": 1, "b": {"c": 2}}
        >>> config2 = {"b": {"d": 3}}
        >>> merged = merge_configs(config1, config2)
        >>> merged
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    logger.debug(f"Merged {len(override)} config keys")
    return result


def build_config(config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Defaults, then an optional YAML file, then in-code overrides; validated.

    Example:
        >>> config = build_config(overrides={"refresh": {"max_age_ms": 50}})
        >>> config["refresh"]["max_age_ms"]
        50
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        config = merge_configs(config, load_config(config_path))
    if overrides:
        config = merge_configs(config, overrides)
    validate_config(config)
    return config


def get_config_value(config: Dict[str, Any],
                     key_path: str,
                     default: Any = None) -> Any:
    """
    Get nested config value using dot notation.

    Example:
        >>> get_config_value(DEFAULT_CONFIG, "per_core.device_name")
        'cpu_thermal'
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def save_config(config: Dict[str, Any],
                output_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        output_path: Output file path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False)

    logger.info(f"Saved config to {output_path}")
