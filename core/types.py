"""
GPU Metrics Core - Data Model
=============================

Types shared by the decoder, the validator and the core detector.

Types:
------
1. Width             - Unsigned field width (u8/u16/u32/u64) and its sentinel
2. ChannelDescriptor - Where one channel lives in a snapshot revision
3. Category          - Temperature, power, frequency
4. SchemaTable       - Descriptors of every slot for one revision
5. RemapEntry        - Validity/placement/label of one slot
6. RemapTable        - Dense per-category array of RemapEntry (numpy)

Sentinel:
---------
All gpu_metrics members are unsigned. The maximum value of a member's width
(0xFF, 0xFFFF, ...) means "no such HW block or measurement".

Author: Telemetry Team
Date: October 19, 2026
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

import numpy as np

from .errors import MalformedDescriptor
from .labels import CORE_OFFSETS, LABELS, NCORES, SLOTS

# Offsets are 13 bits wide in the vendor tooling
MAX_OFFSET = 8191

# label_index is a 6-bit quantity
MAX_LABEL_INDEX = 63

BYTE_ORDERS = {"little": "<", "big": ">"}


class Width(Enum):
    """Unsigned integer width of a snapshot field."""

    U8 = 1
    U16 = 2
    U32 = 4
    U64 = 8

    @property
    def size(self) -> int:
        return self.value

    def dtype(self, byte_order: str = "little") -> np.dtype:
        return np.dtype(f"{BYTE_ORDERS[byte_order]}u{self.value}")

    @property
    def sentinel(self) -> int:
        return int(np.iinfo(np.dtype(f"u{self.value}")).max)

    @classmethod
    def from_name(cls, name: str) -> "Width":
        """Parse "u8" / "u16" / "u32" / "u64"."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown field width: {name}")


@dataclass(frozen=True)
class ChannelDescriptor:
    """
    Location of one channel inside a snapshot.

    The fallback (if any) is consulted once when the primary reads its
    sentinel. Fallbacks never chain.
    """

    offset: int
    width: Width
    fallback: Optional["ChannelDescriptor"] = None

    def __post_init__(self):
        if not 0 <= self.offset <= MAX_OFFSET:
            raise MalformedDescriptor(
                f"Descriptor offset {self.offset} outside [0, {MAX_OFFSET}]"
            )
        if self.fallback is not None and self.fallback.fallback is not None:
            raise MalformedDescriptor("Fallback descriptors cannot have a fallback")

    @property
    def end(self) -> int:
        """One past the last byte of the primary field."""
        return self.offset + self.width.size

    def fits(self, size: int) -> bool:
        """True if the primary and the fallback lie within `size` bytes."""
        if self.end > size:
            return False
        return self.fallback is None or self.fallback.fits(size)


class Category(Enum):
    """Channel category; the value doubles as the label table key."""

    TEMPERATURE = "temp"
    POWER = "power"
    FREQUENCY = "freq"

    @property
    def labels(self) -> Tuple[str, ...]:
        return LABELS[self.value]

    @property
    def slots(self) -> Tuple[str, ...]:
        return SLOTS[self.value]

    @property
    def nslots(self) -> int:
        return len(SLOTS[self.value])

    @property
    def core_offset(self) -> int:
        return CORE_OFFSETS[self.value]

    @property
    def core_slice(self) -> slice:
        return slice(self.core_offset, self.core_offset + NCORES)

    @property
    def zero_is_invalid(self) -> bool:
        # Temperatures are unsigned; 0 is the common "unmeasured" encoding.
        # 0 W / 0 MHz may be a legitimate gated-off reading.
        return self is Category.TEMPERATURE

    @property
    def unit(self) -> str:
        return _UNITS[self]

    def slot_index(self, key: str) -> int:
        """Slot position of a slot key such as "core[3]"."""
        try:
            return SLOTS[self.value].index(key)
        except ValueError:
            raise KeyError(f"Unknown {self.value} slot: {key}")


_UNITS = {
    Category.TEMPERATURE: "centi-degC",
    Category.POWER: "mW",
    Category.FREQUENCY: "MHz",
}


@dataclass(frozen=True)
class SchemaTable:
    """Channel descriptors for one (format, content) revision."""

    format_revision: int
    content_revision: int
    declared_size: int
    temp: Tuple[Optional[ChannelDescriptor], ...]
    power: Tuple[Optional[ChannelDescriptor], ...]
    freq: Tuple[Optional[ChannelDescriptor], ...]
    name: str = ""

    def __post_init__(self):
        for category in Category:
            n = len(self.descriptors(category))
            if n != category.nslots:
                raise ValueError(
                    f"{self.revision}: {category.value} has {n} slots, "
                    f"expected {category.nslots}"
                )

    @property
    def revision(self) -> str:
        return f"v{self.format_revision}.{self.content_revision}"

    def descriptors(self, category: Category) -> Tuple[Optional[ChannelDescriptor], ...]:
        return getattr(self, category.value)

    def core_descriptors(self, category: Category) -> Tuple[Optional[ChannelDescriptor], ...]:
        return self.descriptors(category)[category.core_slice]

    def populated(self, category: Category) -> Iterator[int]:
        """Slot indices that carry a descriptor in this revision."""
        return (i for i, d in enumerate(self.descriptors(category)) if d is not None)


REMAP_DTYPE = np.dtype([
    ("valid", np.bool_),
    ("external", np.bool_),
    ("label_index", np.uint8),
])


@dataclass(frozen=True)
class RemapEntry:
    """One row of a RemapTable."""

    valid: bool
    external: bool
    label_index: int


class RemapTable:
    """
    Dense validity/label table for one category.

    Rows are stored in a numpy structured array (REMAP_DTYPE) with one row
    per schema slot; `core` is a 16-row view onto the per-core run.

    Example:
    --------
    >>> table = RemapTable(Category.POWER)
    >>> table.set(0, valid=True, label_index=0)
    >>> table.valid_slots()
    [0]
    >>> table.freeze()
    """

    def __init__(self, category: Category, entries: Optional[np.ndarray] = None):
        self.category = category
        if entries is None:
            entries = np.zeros(category.nslots, dtype=REMAP_DTYPE)
        if entries.shape != (category.nslots,) or entries.dtype != REMAP_DTYPE:
            raise ValueError(
                f"{category.value} remap table must have shape ({category.nslots},)"
            )
        self.entries = entries

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, slot: int) -> RemapEntry:
        row = self.entries[slot]
        return RemapEntry(
            valid=bool(row["valid"]),
            external=bool(row["external"]),
            label_index=int(row["label_index"]),
        )

    def __iter__(self) -> Iterator[RemapEntry]:
        for slot in range(len(self)):
            yield self[slot]

    @property
    def core(self) -> np.ndarray:
        return self.entries[self.category.core_slice]

    def core_entry(self, core: int) -> RemapEntry:
        if not 0 <= core < NCORES:
            raise IndexError(f"Core index {core} out of range")
        return self[self.category.core_offset + core]

    def set(self, slot: int, valid: Optional[bool] = None,
            external: Optional[bool] = None,
            label_index: Optional[int] = None) -> None:
        if valid is not None:
            self.entries["valid"][slot] = valid
        if external is not None:
            self.entries["external"][slot] = external
        if label_index is not None:
            if not 0 <= label_index <= MAX_LABEL_INDEX:
                raise ValueError(f"Label index {label_index} exceeds 6 bits")
            self.entries["label_index"][slot] = label_index

    def valid_slots(self):
        return [int(i) for i in np.flatnonzero(self.entries["valid"])]

    def label(self, slot: int) -> str:
        return self.category.labels[int(self.entries["label_index"][slot])]

    def copy(self) -> "RemapTable":
        return RemapTable(self.category, self.entries.copy())

    def freeze(self) -> "RemapTable":
        """Make the table read-only; installed tables are never mutated."""
        self.entries.flags.writeable = False
        return self

    @property
    def frozen(self) -> bool:
        return not self.entries.flags.writeable

    def __repr__(self) -> str:
        return (
            f"RemapTable({self.category.value}, "
            f"valid={len(self.valid_slots())}/{len(self)})"
        )
