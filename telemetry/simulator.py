"""
GPU Metrics Telemetry - Synthetic Snapshot Simulator
====================================================

Builds gpu_metrics blobs for any supported revision, for tests and for
exercising the decoding pipeline without AMD hardware.

Simulation Components:
----------------------
1. Blank snapshot   - Every byte set to 0xFF, so every field reads its
                      sentinel ("no such HW block")
2. Header           - structure_size and revisions written from the layout
3. Field setters    - Raw struct members, schema slots, or whole cores
4. populate()       - Plausible readings for every slot of the revision

Value Ranges (populate):
------------------------
- Temperature: 35-85 degC (centi-degC)
- Power:       1-15 W per slot (mW), socket/APU up to 45 W
- Frequency:   400-3000 MHz

Example:
--------
>>> sim = SnapshotSimulator(registry, format_revision=2, content_revision=1, seed=7)
>>> sim.populate()
>>> sim.set_core(3, temp=4200, power=0, freq=0)   # dummy core
>>> blob = sim.build()
>>> source = MemorySnapshotSource([blob])

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
from typing import Optional, Union

import numpy as np

from core.labels import NCORES
from core.types import Category, ChannelDescriptor, SchemaTable, Width
from revisions.registry import SchemaRegistry, default_registry
from revisions.layout import StructLayout

from .header import HEADER_MEMBERS

logger = logging.getLogger(__name__)

# (low, high) of populate(), native units
VALUE_RANGES = {
    Category.TEMPERATURE: (3500, 8500),
    Category.POWER: (1000, 15000),
    Category.FREQUENCY: (400, 3000),
}


class SnapshotSimulator:
    """
    Synthetic gpu_metrics snapshot builder.

    Args:
        registry: Schema registry (default: bundled layouts)
        format_revision: Major revision of the snapshot
        content_revision: Minor revision of the snapshot
        seed: Seed of the value generator used by populate()
    """

    def __init__(self, registry: Optional[SchemaRegistry] = None,
                 format_revision: int = 2, content_revision: int = 1,
                 seed: Optional[int] = None):
        self.registry = registry or default_registry()
        self.schema: SchemaTable = self.registry.lookup(format_revision, content_revision)
        self.struct: StructLayout = self.registry.layout.struct(self.schema.name)
        self.byte_order = self.registry.byte_order
        self.rng = np.random.default_rng(seed)

        self.buffer = bytearray(b"\xff" * self.schema.declared_size)
        self.write_header(
            structure_size=self.schema.declared_size,
            format_revision=format_revision,
            content_revision=content_revision,
        )

    # ------------------------------------------------------------------
    # Raw writes
    # ------------------------------------------------------------------

    def _write(self, offset: int, width: Width, value: int) -> None:
        if not 0 <= value <= width.sentinel:
            raise ValueError(f"Value {value} does not fit {width.name}")
        raw = np.array(value, dtype=width.dtype(self.byte_order)).tobytes()
        self.buffer[offset:offset + width.size] = raw

    def write_header(self, **values: int) -> "SnapshotSimulator":
        """Overwrite header members (structure_size, format/content_revision)."""
        header = self.registry.header
        base = self.struct.member("common_header").offset if "common_header" in self.struct else 0
        for name, value in values.items():
            if name not in HEADER_MEMBERS:
                raise KeyError(f"Unknown header member: {name}")
            offset, width = header.resolve(name)
            self._write(base + offset, width, value)
        return self

    def set_field(self, ref: str, value: int) -> "SnapshotSimulator":
        """Set a struct member, e.g. "temperature_core[3]"."""
        offset, width = self.struct.resolve(ref)
        self._write(offset, width, value)
        return self

    def clear_field(self, ref: str) -> "SnapshotSimulator":
        """Reset a struct member to its sentinel."""
        offset, width = self.struct.resolve(ref)
        self._write(offset, width, width.sentinel)
        return self

    # ------------------------------------------------------------------
    # Schema-level writes
    # ------------------------------------------------------------------

    def descriptor(self, category: Category, slot: Union[int, str]) -> ChannelDescriptor:
        if isinstance(slot, str):
            slot = category.slot_index(slot)
        descriptor = self.schema.descriptors(category)[slot]
        if descriptor is None:
            raise KeyError(
                f"{self.schema.revision} has no {category.value} slot {category.slots[slot]}"
            )
        return descriptor

    def set_slot(self, category: Category, slot: Union[int, str], value: int,
                 fallback: Optional[int] = None) -> "SnapshotSimulator":
        """
        Set the field behind a schema slot.

        Args:
            category: Channel category
            slot: Slot index or slot key ("core[3]", "uclk")
            value: Primary field value (use the sentinel for "not measured")
            fallback: Fallback field value, if the slot has one
        """
        descriptor = self.descriptor(category, slot)
        self._write(descriptor.offset, descriptor.width, value)
        if fallback is not None:
            if descriptor.fallback is None:
                raise KeyError(f"{category.value} slot {slot} has no fallback")
            self._write(descriptor.fallback.offset, descriptor.fallback.width, fallback)
        return self

    def set_sentinel(self, category: Category, slot: Union[int, str]) -> "SnapshotSimulator":
        descriptor = self.descriptor(category, slot)
        return self.set_slot(category, slot, descriptor.width.sentinel)

    def set_core(self, core: int, temp: Optional[int] = None,
                 power: Optional[int] = None,
                 freq: Optional[int] = None) -> "SnapshotSimulator":
        """Set the per-core temperature, power and frequency of one core."""
        if not 0 <= core < NCORES:
            raise IndexError(f"Core index {core} out of range")
        values = {
            Category.TEMPERATURE: temp,
            Category.POWER: power,
            Category.FREQUENCY: freq,
        }
        for category, value in values.items():
            if value is not None:
                self.set_slot(category, category.core_offset + core, value)
        return self

    def populate(self) -> "SnapshotSimulator":
        """Write plausible values into every slot of the revision."""
        for category in Category:
            low, high = VALUE_RANGES[category]
            for slot in self.schema.populated(category):
                descriptor = self.schema.descriptors(category)[slot]
                value = int(self.rng.integers(low, high))
                self._write(descriptor.offset, descriptor.width,
                            min(value, descriptor.width.sentinel - 1))
        logger.debug(f"Populated synthetic {self.schema.revision} snapshot")
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def build(self) -> bytes:
        return bytes(self.buffer)

    def truncated(self, length: int) -> bytes:
        """First `length` bytes of the snapshot."""
        return bytes(self.buffer[:length])

    def __len__(self) -> int:
        return len(self.buffer)
