"""
GPU Metrics Revisions - Vendor Struct Layouts
=============================================

Loads the vendor struct definitions (metrics_table_header and every
gpu_metrics_vX_Y struct) from YAML data and computes member offsets.

Layout Rules (C natural alignment):
-----------------------------------
1. A scalar member is aligned to its own size (u8=1, u16=2, u32=4, u64=8).
2. A composite member is aligned to the largest alignment of its members.
3. Arrays repeat the element size; alignment is the element's.
4. The struct size is padded to a multiple of the struct alignment.

YAML Structure:
---------------
byte_order: little
constants: {NUM_HBM_INSTANCES: 4}
types:
  metrics_table_header:
    - [structure_size, u16]
header: metrics_table_header
structs:
  v1_1:
    fields:
      - [common_header, metrics_table_header]
      - [temperature_hbm, u16, NUM_HBM_INSTANCES]
  v1_2:
    extends: v1_1
    fields:
      - [firmware_timestamp, u64]

Example:
--------
>>> layout = load_layout()
>>> v1_1 = layout.struct("v1_1")
>>> v1_1.resolve("temperature_hbm[2]")
(92, <Width.U16: 2>)

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from core.types import BYTE_ORDERS, Width

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_PATH = Path(__file__).parent / "layouts" / "gpu_metrics.yaml"

_REF_PATTERN = re.compile(r"^(\w+)(?:\[(\d+)\])?$")


class LayoutError(Exception):
    """Invalid vendor layout data."""
    pass


@dataclass(frozen=True)
class FieldLayout:
    """One member of a struct."""

    name: str
    offset: int
    type_name: str
    element_size: int
    count: int
    width: Optional[Width]

    @property
    def size(self) -> int:
        return self.element_size * self.count

    @property
    def is_array(self) -> bool:
        return self.count > 1


@dataclass
class StructLayout:
    """Computed layout of one struct."""

    name: str
    size: int
    alignment: int
    fields: Dict[str, FieldLayout] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def member(self, name: str) -> FieldLayout:
        try:
            return self.fields[name]
        except KeyError:
            raise LayoutError(f"{self.name} has no member '{name}'")

    def resolve(self, ref: str) -> Tuple[int, Width]:
        """
        Resolve a member reference to (offset, width).

        Args:
            ref: "member" or "member[index]"

        Returns:
            Byte offset and width of the referenced scalar

        Raises:
            LayoutError: Unknown member, index out of range, array without
                index, or a composite member
        """
        match = _REF_PATTERN.match(ref)
        if not match:
            raise LayoutError(f"Malformed member reference: {ref}")

        member = self.member(match.group(1))
        if member.width is None:
            raise LayoutError(f"{self.name}.{member.name} is not a scalar member")

        index = match.group(2)
        if index is None:
            if member.is_array:
                raise LayoutError(f"{self.name}.{member.name} is an array; index required")
            return member.offset, member.width

        index = int(index)
        if index >= member.count:
            raise LayoutError(
                f"{self.name}.{member.name}[{index}] out of range (count={member.count})"
            )
        return member.offset + index * member.element_size, member.width


@dataclass
class VendorLayout:
    """All struct layouts of one vendor header."""

    byte_order: str
    header: StructLayout
    structs: Dict[str, StructLayout]
    source: Optional[Path] = None

    def struct(self, name: str) -> StructLayout:
        try:
            return self.structs[name]
        except KeyError:
            raise LayoutError(f"No struct layout for '{name}'")


def _compute(name: str, members: List[Any], constants: Dict[str, int],
             types: Dict[str, StructLayout]) -> StructLayout:
    """Lay out one member list."""
    offset = 0
    alignment = 1
    fields = {}

    for member in members:
        if not isinstance(member, (list, tuple)) or len(member) not in (2, 3):
            raise LayoutError(f"{name}: member must be [name, type(, count)]: {member}")

        member_name, type_name = member[0], member[1]
        count = member[2] if len(member) == 3 else 1
        if isinstance(count, str):
            if count not in constants:
                raise LayoutError(f"{name}.{member_name}: unknown constant {count}")
            count = constants[count]
        if not isinstance(count, int) or count < 1:
            raise LayoutError(f"{name}.{member_name}: invalid count {count}")

        if type_name in types:
            width = None
            element_size = types[type_name].size
            element_align = types[type_name].alignment
        else:
            try:
                width = Width.from_name(type_name)
            except ValueError:
                raise LayoutError(f"{name}.{member_name}: unknown type {type_name}")
            element_size = element_align = width.size

        if member_name in fields:
            raise LayoutError(f"{name}: duplicate member {member_name}")

        offset = -(-offset // element_align) * element_align
        fields[member_name] = FieldLayout(
            name=member_name,
            offset=offset,
            type_name=type_name,
            element_size=element_size,
            count=count,
            width=width,
        )
        offset += element_size * count
        alignment = max(alignment, element_align)

    size = -(-offset // alignment) * alignment
    return StructLayout(name=name, size=size, alignment=alignment, fields=fields)


def _member_list(name: str, structs: Dict[str, Any],
                 seen: Tuple[str, ...] = ()) -> List[Any]:
    """Flatten "extends" chains into one member list."""
    if name in seen:
        raise LayoutError(f"Circular extends: {' -> '.join(seen + (name,))}")
    if name not in structs:
        raise LayoutError(f"Unknown struct: {name}")

    entry = structs[name] or {}
    members = list(entry.get("fields") or [])
    parent = entry.get("extends")
    if parent is None:
        return members
    return _member_list(parent, structs, seen + (name,)) + members


def parse_layout(data: Dict[str, Any], source: Optional[Path] = None) -> VendorLayout:
    """
    Build a VendorLayout from an already-parsed YAML document.

    Args:
        data: Layout document
        source: File the document came from (for diagnostics)

    Returns:
        VendorLayout
    """
    if not isinstance(data, dict):
        raise LayoutError("Layout document must be a mapping")

    byte_order = data.get("byte_order", "little")
    if byte_order not in BYTE_ORDERS:
        raise LayoutError(f"Unknown byte order: {byte_order}")

    constants = data.get("constants") or {}

    types: Dict[str, StructLayout] = {}
    for type_name, members in (data.get("types") or {}).items():
        types[type_name] = _compute(type_name, members, constants, types)

    header_name = data.get("header")
    if header_name not in types:
        raise LayoutError(f"Header type '{header_name}' is not defined under types")

    raw_structs = data.get("structs") or {}
    structs = {
        name: _compute(name, _member_list(name, raw_structs), constants, types)
        for name in raw_structs
    }

    return VendorLayout(
        byte_order=byte_order,
        header=types[header_name],
        structs=structs,
        source=source,
    )


def load_layout(path: Optional[Union[str, Path]] = None) -> VendorLayout:
    """
    Load vendor layouts from YAML.

    Args:
        path: Layout file (default: bundled gpu_metrics.yaml)

    Returns:
        VendorLayout

    Raises:
        LayoutError: If the file is missing or invalid
    """
    path = Path(path) if path is not None else DEFAULT_LAYOUT_PATH

    if not path.exists():
        raise LayoutError(f"Layout file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LayoutError(f"Invalid YAML in {path}: {e}")

    layout = parse_layout(data, source=path)
    logger.debug(f"Loaded {len(layout.structs)} struct layouts from {path}")
    return layout
