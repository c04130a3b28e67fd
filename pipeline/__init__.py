"""
GPU Metrics Pipeline Module - Initialization
============================================

Pipeline module turns a gpu_metrics source into a sensor device.

Components:
-----------
1. device.py   - MetricsDevice, open_device, open_all_devices
2. __init__.py - Module initialization and exports

End-to-End Flow:
----------------
Config (YAML + defaults)
    ↓
[Registry] Vendor layouts → schema tables
    ↓
[Cache] Read → header → size checks → validate → detect → place
    ↓
[Device] Labels, visibility, reads, per-core device
    ↓
Output: (label, value) per visible channel + diagnostic report

Usage:
------
from pipeline import open_device
from utils import build_config

device = open_device(build_config("config/default.yaml"))
print(device.report())

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
"""

from .device import (
    MetricsDevice,
    open_device,
    open_all_devices,
)

__all__ = [
    "MetricsDevice",
    "open_device",
    "open_all_devices",
]

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"
