"""
GPU Metrics Pipeline - Metrics Device
=====================================

Presents one gpu_metrics source as a sensor device: labelled temperature,
power and frequency channels, with the per-core channels optionally split
off into a second device (e.g. "cpu_thermal").

Device Lifecycle:
-----------------
1. Merge the configuration over DEFAULT_CONFIG and validate it
2. Build (or reuse) the schema registry for the configured layout file
3. Initialize the snapshot cache (fatal errors propagate)
4. Serve reads; each read refreshes the cache once per refresh interval

Channel Addressing:
-------------------
Main device:      (category, slot)  slot in [0, category.nslots)
Per-core device:  (category, index) index in [0, per_core_channels())
                  index n is physical core per_core_map[n]

Example:
--------
>>> device = open_device(build_config(overrides={"source": {"path": path}}))
>>> for slot in device.visible_channels(Category.TEMPERATURE):
...     print(device.label(Category.TEMPERATURE, slot),
...           device.read(Category.TEMPERATURE, slot))
Hotspot 5120
Mem 4730

Author: Telemetry Team
Date: October 19, 2026
"""

import copy
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.errors import ChannelUnavailable, MetricsError
from core.types import Category
from revisions.registry import SchemaRegistry, default_registry
from telemetry.cache import InstalledSnapshot, SnapshotCache
from telemetry.source import FileSnapshotSource, SnapshotSource, discover_paths
from utils.config import DEFAULT_CONFIG, merge_configs, validate_config
from utils.logging import (
    create_diagnostic_report,
    log_channels,
    log_error,
    log_snapshot,
    save_diagnostic_report,
)

logger = logging.getLogger(__name__)

ChannelTable = Dict[str, List[Tuple[str, Optional[int]]]]


class MetricsDevice:
    """
    Sensor device backed by one gpu_metrics source.

    Args:
        config: Configuration (merged over DEFAULT_CONFIG)
        source: Snapshot source (default: file at source.path)
        registry: Schema registry (default: registry of the layout file)
        clock: Monotonic clock in seconds
    """

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 source: Optional[SnapshotSource] = None,
                 registry: Optional[SchemaRegistry] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.config = merge_configs(DEFAULT_CONFIG, config or {})
        validate_config(self.config)

        self.name = self.config["device_name"]
        per_core = self.config["per_core"]
        self.per_core_name = per_core.get("device_name") or ""
        self.separate_per_core = bool(per_core.get("separate")) and bool(self.per_core_name)

        self.registry = registry or default_registry(self.config.get("layout"))
        self.source = source or FileSnapshotSource(self.config["source"]["path"])

        self.cache = SnapshotCache(
            self.source,
            self.registry,
            max_age=self.config["refresh"]["max_age_ms"] / 1000.0,
            clock=clock,
            separate_per_core=self.separate_per_core,
        )
        self.cache.initialize()

        state = self.state
        logger.info(
            f"{self.name}: {self.source.name} {state.revision}, "
            f"{sum(len(self.visible_channels(c)) for c in Category)} channels"
        )
        if self.per_core_channels():
            logger.info(f"{self.per_core_name}: {self.per_core_channels()} cores")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> InstalledSnapshot:
        return self.cache.state

    @property
    def revision(self) -> str:
        return self.state.revision

    @property
    def has_per_core(self) -> bool:
        return self.state.has_per_core

    # ------------------------------------------------------------------
    # Main device
    # ------------------------------------------------------------------

    def is_visible(self, category: Category, slot: int) -> bool:
        """Valid, and not moved to the per-core device."""
        if not 0 <= slot < category.nslots:
            return False
        entry = self.state.tables[category][slot]
        return entry.valid and not entry.external

    def visible_channels(self, category: Category) -> List[int]:
        return [
            slot for slot in range(category.nslots)
            if self.is_visible(category, slot)
        ]

    def label(self, category: Category, slot: int) -> str:
        """
        Label of a visible channel.

        Raises:
            IndexError: Slot outside the category
            ChannelUnavailable: Channel is hidden
        """
        if not 0 <= slot < category.nslots:
            raise IndexError(f"{category.value} slot {slot} out of range")
        if not self.is_visible(category, slot):
            raise ChannelUnavailable(f"{category.value} slot {slot} is not visible")
        return self.state.tables[category].label(slot)

    def read(self, category: Category, slot: int) -> int:
        """
        Read a visible channel, refreshing the snapshot when it is too old.

        Raises:
            IndexError: Slot outside the category
            ChannelUnavailable: Channel is hidden
            MetricsError: The refresh failed
        """
        if not 0 <= slot < category.nslots:
            raise IndexError(f"{category.value} slot {slot} out of range")
        self.cache.ensure_fresh()
        if not self.is_visible(category, slot):
            raise ChannelUnavailable(f"{category.value} slot {slot} is not visible")
        return self.cache.read_channel(category, slot)

    # ------------------------------------------------------------------
    # Per-core device
    # ------------------------------------------------------------------

    def per_core_channels(self) -> int:
        """Number of channels of the per-core device (0 if merged or absent)."""
        if not self.separate_per_core:
            return 0
        return len(self.state.per_core_map)

    def _core(self, index: int) -> int:
        if not 0 <= index < self.per_core_channels():
            raise IndexError(f"Per-core channel {index} out of range")
        return self.state.per_core_map[index]

    def per_core_label(self, category: Category, index: int) -> str:
        """
        Label of the index-th per-core channel of a category.

        Raises:
            IndexError: Index outside the per-core device
            ChannelUnavailable: That core has no channel of this category
        """
        core = self._core(index)
        table = self.state.tables[category]
        if not table.core_entry(core).valid:
            raise ChannelUnavailable(f"Core {core} has no {category.value} channel")
        return table.label(category.core_offset + core)

    def read_per_core(self, category: Category, index: int) -> int:
        core = self._core(index)
        self.cache.ensure_fresh()
        return self.cache.read_core_channel(category, core)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def _read_or_none(self, read: Callable[[], int]) -> Optional[int]:
        try:
            return read()
        except ChannelUnavailable:
            return None

    def snapshot_table(self) -> ChannelTable:
        """
        (label, value) of every visible channel, per category.

        Per-core channels of a separate per-core device are listed under
        "<per_core_name>/<category>". Values are None for channels that
        became unavailable.
        """
        self.cache.ensure_fresh()
        table: ChannelTable = {}

        for category in Category:
            table[category.value] = [
                (self.label(category, slot),
                 self._read_or_none(lambda s=slot, c=category: self.cache.read_channel(c, s)))
                for slot in self.visible_channels(category)
            ]

        for category in Category:
            if not self.per_core_channels():
                break
            rows = []
            for index in range(self.per_core_channels()):
                core = self.state.per_core_map[index]
                if not self.state.tables[category].core_entry(core).valid:
                    continue
                rows.append((
                    self.per_core_label(category, index),
                    self._read_or_none(
                        lambda c=category, k=core: self.cache.read_core_channel(c, k)
                    ),
                ))
            table[f"{self.per_core_name}/{category.value}"] = rows

        return table

    def stats(self) -> Dict[str, Any]:
        state = self.state
        return {
            "device": self.name,
            "source": self.source.name,
            "revision": state.revision,
            "size": len(state.snapshot),
            "per_core": self.per_core_name if self.per_core_channels() else "merged",
            "functional_cores": state.functional_cores,
        }

    def report(self, output_path: Optional[str] = None) -> str:
        """
        Human-readable diagnostic report of every visible channel.

        Each category is also logged at DEBUG; with output_path the report
        is written to that file as well.
        """
        log_snapshot(self.state)
        table = self.snapshot_table()
        for category_name, channels in table.items():
            log_channels(category_name, channels)

        report = create_diagnostic_report(table, self.stats())
        if output_path is not None:
            save_diagnostic_report(report, output_path)
        return report

    def __repr__(self) -> str:
        return f"MetricsDevice({self.name!r}, {self.source.name!r})"


def open_device(config: Optional[Dict[str, Any]] = None,
                source: Optional[SnapshotSource] = None,
                registry: Optional[SchemaRegistry] = None,
                clock: Callable[[], float] = time.monotonic) -> MetricsDevice:
    """
    Open the device at source.path (or an explicit source).

    Raises:
        ConfigError: Invalid configuration
        MetricsError: Initialization failed (unsupported revision, bad size,
            unreadable source)
    """
    return MetricsDevice(config, source=source, registry=registry, clock=clock)


def open_all_devices(config: Optional[Dict[str, Any]] = None,
                     registry: Optional[SchemaRegistry] = None,
                     clock: Callable[[], float] = time.monotonic) -> List[MetricsDevice]:
    """
    Open one device per gpu_metrics file matching source.glob.

    Files that fail to initialize are logged and skipped.
    """
    merged = merge_configs(DEFAULT_CONFIG, config or {})
    devices = []

    for path in discover_paths(merged["source"]["glob"]):
        device_config = copy.deepcopy(merged)
        device_config["source"]["path"] = path
        try:
            devices.append(MetricsDevice(device_config, registry=registry, clock=clock))
        except MetricsError as e:
            log_error(e, context=f"Skipping {path}")

    return devices
