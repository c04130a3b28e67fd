"""
GPU Metrics Telemetry Module - Initialization
=============================================

Telemetry module acquires gpu_metrics snapshots and keeps the decoded state.

Components:
-----------
1. source.py    - Snapshot sources (sysfs file, in-memory replay)
2. header.py    - metrics_table_header parsing
3. cache.py     - Time-bounded snapshot cache with atomic installs
4. simulator.py - Synthetic snapshot generation (testing/validation)

Refresh Pipeline:
-----------------
Raw bytes (source)
    ↓
[Header] structure_size, format/content revision
    ↓
[Length checks] returned == header == schema
    ↓
[Validator] temperature / power / frequency remap tables
    ↓
[Detector] functional vs dummy cores
    ↓
[Placement] optional separate per-core device
    ↓
Installed snapshot → readers

Usage:
------
from telemetry import FileSnapshotSource, SnapshotCache
from revisions import default_registry

cache = SnapshotCache(FileSnapshotSource(path), default_registry(), max_age=0.1)
cache.initialize()
value = cache.read_channel(Category.TEMPERATURE, 1)

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
"""

from .header import (
    SnapshotHeader,
    Snapshot,
    parse_header,
)

from .source import (
    SnapshotSource,
    FileSnapshotSource,
    MemorySnapshotSource,
    CallableSnapshotSource,
    discover_paths,
    DEFAULT_GPU_METRICS_PATH,
    DEFAULT_GPU_METRICS_GLOB,
)

from .cache import (
    SnapshotCache,
    InstalledSnapshot,
    DEFAULT_MAX_AGE,
)

from .simulator import SnapshotSimulator

__all__ = [
    # Header
    "SnapshotHeader",
    "Snapshot",
    "parse_header",
    # Sources
    "SnapshotSource",
    "FileSnapshotSource",
    "MemorySnapshotSource",
    "CallableSnapshotSource",
    "discover_paths",
    "DEFAULT_GPU_METRICS_PATH",
    "DEFAULT_GPU_METRICS_GLOB",
    # Cache
    "SnapshotCache",
    "InstalledSnapshot",
    "DEFAULT_MAX_AGE",
    # Simulation
    "SnapshotSimulator",
]

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"
