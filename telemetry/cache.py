"""
GPU Metrics Telemetry - Snapshot Cache
======================================

Holds the most recent decoded snapshot and refreshes it at most once per
refresh interval.

Refresh Sequence:
-----------------
1. Bounded read of registry.max_size bytes from the source
2. Parse metrics_table_header
3. Length checks: returned length == header structure_size == schema
   declared_size (any mismatch is a SizeMismatch)
4. Validate temperature, power and frequency
5. Detect functional cores (NoFunctionalCores downgrades per-core only)
6. Optionally move per-core channels to a separate device
7. Freeze the tables and install a new InstalledSnapshot

State Model:
------------
The installed state is an immutable object replaced by one reference
assignment. Readers never lock. Refreshes are serialized by a lock and a
caller that acquires it after someone else refreshed returns without
reading the source again.

A failed refresh keeps the previous state, marks the cache stale and
failed, and re-raises. Reads triggered by that refresh fail too; cached
values are not served once the cache is stale.

Example:
--------
>>> cache = SnapshotCache(FileSnapshotSource(path), default_registry())
>>> cache.initialize()
>>> cache.read_channel(Category.TEMPERATURE, 1)
4200

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from core.decoder import FieldDecoder
from core.detector import CoreFunctionalityDetector
from core.errors import ChannelUnavailable, NoFunctionalCores, SizeMismatch
from core.labels import NCORES
from core.placement import split_per_core
from core.types import Category, RemapTable, SchemaTable
from core.validator import ChannelValidator
from revisions.registry import SchemaRegistry

from .header import Snapshot, parse_header
from .source import SnapshotSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 0.1  # seconds


@dataclass(frozen=True)
class InstalledSnapshot:
    """Everything a reader needs, installed atomically."""

    snapshot: Snapshot
    schema: SchemaTable
    tables: Dict[Category, RemapTable]
    has_per_core: bool
    functional_cores: int = 0
    per_core_map: Tuple[int, ...] = field(default_factory=tuple)
    timestamp: float = 0.0

    @property
    def revision(self) -> str:
        return self.schema.revision


class SnapshotCache:
    """
    Time-bounded cache of decoded gpu_metrics snapshots.

    Args:
        source: Snapshot source
        registry: Schema registry
        max_age: Refresh interval in seconds
        clock: Monotonic clock returning seconds
        separate_per_core: Mark per-core channels external
        decoder: Field decoder (default: registry byte order)
    """

    def __init__(self, source: SnapshotSource, registry: SchemaRegistry,
                 max_age: float = DEFAULT_MAX_AGE,
                 clock: Callable[[], float] = time.monotonic,
                 separate_per_core: bool = False,
                 decoder: Optional[FieldDecoder] = None):
        if max_age <= 0:
            raise ValueError(f"max_age must be positive, got {max_age}")

        self.source = source
        self.registry = registry
        self.max_age = max_age
        self.clock = clock
        self.separate_per_core = separate_per_core

        self.decoder = decoder or FieldDecoder(registry.byte_order)
        self.validator = ChannelValidator(self.decoder)
        self.detector = CoreFunctionalityDetector(self.decoder)

        self._lock = threading.Lock()
        self._state: Optional[InstalledSnapshot] = None
        self._stale = True
        self._last_error: Optional[Exception] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> Optional[InstalledSnapshot]:
        return self._state

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    def _is_fresh(self, max_age: float) -> bool:
        state = self._state
        if state is None or self._stale:
            return False
        return self.clock() - state.timestamp < max_age

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def initialize(self) -> InstalledSnapshot:
        """
        First refresh.

        Raises:
            UnsupportedSchema, SizeMismatch, SourceReadError: Initialization
                fails and no channel is exposed
        """
        return self.refresh()

    def ensure_fresh(self, max_age: Optional[float] = None) -> bool:
        """
        Refresh if the installed snapshot is older than max_age.

        Returns:
            True if this call refreshed, False if the cache was fresh
        """
        max_age = self.max_age if max_age is None else max_age
        if self._is_fresh(max_age):
            return False

        with self._lock:
            # Someone else may have refreshed while we waited
            if self._is_fresh(max_age):
                return False
            self._refresh_locked()
            return True

    def refresh(self) -> InstalledSnapshot:
        """Unconditionally read, decode and install a new snapshot."""
        with self._lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> InstalledSnapshot:
        try:
            state = self._decode()
        except Exception as e:
            self._stale = True
            self._last_error = e
            logger.error(f"gpu_metrics refresh failed: {e}")
            raise

        previous = self._state
        self._state = state
        self._stale = False
        self._last_error = None

        if previous is None or previous.revision != state.revision:
            logger.info(f"gpu_metrics {state.revision}, size={len(state.snapshot)} B")
        return state

    def _decode(self) -> InstalledSnapshot:
        data = self.source.read_snapshot(self.registry.max_size)
        header = parse_header(data, self.registry.header, self.registry.byte_order)
        schema = self.registry.lookup(header.format_revision, header.content_revision)

        if len(data) != header.structure_size:
            raise SizeMismatch(
                f"Invalid gpu_metrics size: read {len(data)} B, "
                f"header says {header.structure_size} B",
                actual=len(data), expected=header.structure_size,
            )
        if header.structure_size != schema.declared_size:
            raise SizeMismatch(
                f"Invalid gpu_metrics size: header says {header.structure_size} B, "
                f"{schema.revision} is {schema.declared_size} B",
                actual=header.structure_size, expected=schema.declared_size,
            )

        snapshot = Snapshot(header=header, data=bytes(data))
        tables = self.validator.validate_all(snapshot.data, schema)

        functional = 0
        try:
            report = self.detector.detect(snapshot.data, schema, tables)
            tables = report.tables
            functional = report.functional
            has_per_core = True
        except NoFunctionalCores as e:
            logger.debug(f"Per-core channels disabled: {e}")
            tables = e.tables
            has_per_core = False

        per_core_map: Tuple[int, ...] = ()
        if self.separate_per_core and has_per_core:
            tables, core_map = split_per_core(tables)
            per_core_map = tuple(core_map)

        for table in tables.values():
            table.freeze()

        return InstalledSnapshot(
            snapshot=snapshot,
            schema=schema,
            tables=tables,
            has_per_core=has_per_core,
            functional_cores=functional,
            per_core_map=per_core_map,
            timestamp=self.clock(),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_channel(self, category: Category, slot: int) -> int:
        """
        Read one channel from the current snapshot.

        Raises:
            IndexError: Slot outside the category
            ChannelUnavailable: Slot is not valid in this snapshot
            MetricsError: The refresh this read triggered failed
        """
        if not 0 <= slot < category.nslots:
            raise IndexError(f"{category.value} slot {slot} out of range")

        self.ensure_fresh()
        state = self._state

        if not state.tables[category][slot].valid:
            raise ChannelUnavailable(f"{category.labels[slot]} is unavailable")

        descriptor = state.schema.descriptors(category)[slot]
        return self.decoder.decode(state.snapshot.data, descriptor)

    def read_core_channel(self, category: Category, core: int) -> int:
        """Read the channel of physical core `core` (0..15)."""
        if not 0 <= core < NCORES:
            raise IndexError(f"Core index {core} out of range")
        return self.read_channel(category, category.core_offset + core)
