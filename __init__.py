"""
GPU Metrics Telemetry System
============================

Decodes AMD gpu_metrics snapshots into validated sensor channels.

Modules:
--------
- config: Default YAML configuration
- core: Data model, field decoder, channel validator, core detector
- revisions: Vendor struct layouts and the schema registry
- telemetry: Snapshot sources, header parsing, snapshot cache, simulator
- pipeline: Sensor device facade
- tests: Unit and integration tests
- utils: Configuration & logging utilities

Features:
---------
- Every gpu_metrics revision v1.0-v1.8, v2.0-v2.4, v3.0
- Sentinel-aware decoding with average/current fallbacks
- Functional vs dummy CPU core detection
- Optional separate per-core device (cpu_thermal)
- Time-bounded snapshot cache with atomic installs

Quick Start:
-----------
from utils import build_config, setup_logging_from_config
from pipeline import open_device

config = build_config("config/default.yaml")
setup_logging_from_config(config)

device = open_device(config)
print(device.report())

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"
__all__ = [
    "config",
    "core",
    "revisions",
    "pipeline",
    "telemetry",
    "tests",
    "utils",
]
