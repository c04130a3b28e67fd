"""
GPU Metrics Utils Module - Initialization
=========================================

Utility functions and helpers for the gpu_metrics telemetry system.

Submodules:
-----------
1. config.py   - Configuration loading and validation
2. logging.py  - Logging setup and diagnostics

Functions:
----------
1. Configuration Management
   - load_config()        - Load YAML config
   - validate_config()    - Validate config structure
   - merge_configs()      - Override defaults
   - build_config()       - Defaults + file + overrides, validated

2. Logging & Diagnostics
   - setup_logging()      - Configure logging
   - get_logger()         - Get module logger
   - log_snapshot()       - Log an installed snapshot
   - log_channels()       - Log visible channels

Usage:
------
from utils import build_config, setup_logging_from_config
from pipeline import open_device

config = build_config("config/default.yaml")
setup_logging_from_config(config)
device = open_device(config)

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
"""

from .config import (
    load_config,
    validate_config,
    merge_configs,
    build_config,
    get_config_value,
    save_config,
    ConfigError,
    DEFAULT_CONFIG,
    MAX_DEVICE_NAME,
)

from .logging import (
    StructuredFormatter,
    setup_logging,
    setup_logging_from_config,
    get_logger,
    log_snapshot,
    log_channels,
    log_error,
    create_diagnostic_report,
    save_diagnostic_report,
)

__all__ = [
    # Config functions
    "load_config",
    "validate_config",
    "merge_configs",
    "build_config",
    "get_config_value",
    "save_config",
    "ConfigError",
    "DEFAULT_CONFIG",
    "MAX_DEVICE_NAME",
    # Logging functions
    "StructuredFormatter",
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    "log_snapshot",
    "log_channels",
    "log_error",
    "create_diagnostic_report",
    "save_diagnostic_report",
]

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"
