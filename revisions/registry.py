"""
GPU Metrics Revisions - Schema Registry
=======================================

One SchemaTable per supported (format_revision, content_revision),
built once from the vendor layouts and the channel building blocks.

Supported Revisions:
--------------------
    v1.0            dGPU, current/average clock fallbacks
    v1.1 - v1.3     + HBM temperatures
    v1.4 - v1.8     multi-XCC parts, per-instance clocks
    v2.0 - v2.4     APU, 8 cores, L3
    v3.0            APU, 16 cores, skin, IPU/APU/dGPU/Sys power

Example:
--------
>>> registry = default_registry()
>>> schema = registry.lookup(2, 1)
>>> schema.revision
'v2.1'
>>> registry.lookup(9, 0)
Traceback (most recent call last):
    ...
UnsupportedSchema: Unsupported gpu_metrics revision v9.0

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from core.errors import UnsupportedSchema
from core.types import Category, ChannelDescriptor, SchemaTable

from .channels import REVISION_FAMILIES, ChannelMap, FieldRef, RevisionChannels
from .layout import LayoutError, StructLayout, VendorLayout, load_layout

logger = logging.getLogger(__name__)


def _descriptor(struct: StructLayout, ref: FieldRef) -> ChannelDescriptor:
    """Resolve a member reference (or primary/fallback pair)."""
    if isinstance(ref, tuple):
        primary, fallback = ref
        offset, width = struct.resolve(primary)
        fb_offset, fb_width = struct.resolve(fallback)
        return ChannelDescriptor(offset, width, ChannelDescriptor(fb_offset, fb_width))

    offset, width = struct.resolve(ref)
    return ChannelDescriptor(offset, width)


def _category_descriptors(struct: StructLayout, category: Category,
                          channel_map: ChannelMap) -> Tuple[Optional[ChannelDescriptor], ...]:
    """Lay a channel map out over the fixed slot order of a category."""
    descriptors: List[Optional[ChannelDescriptor]] = [None] * category.nslots
    for slot_key, ref in channel_map.items():
        try:
            slot = category.slot_index(slot_key)
        except KeyError as e:
            raise LayoutError(f"{struct.name}: {e}")
        descriptors[slot] = _descriptor(struct, ref)
    return tuple(descriptors)


def build_schema(struct: StructLayout, format_revision: int,
                 content_revision: int, channels: RevisionChannels) -> SchemaTable:
    """
    Compose one SchemaTable.

    Args:
        struct: Vendor layout of the revision's struct
        format_revision: Major revision
        content_revision: Minor revision
        channels: Channel maps for temperature, power, frequency

    Returns:
        SchemaTable
    """
    return SchemaTable(
        format_revision=format_revision,
        content_revision=content_revision,
        declared_size=struct.size,
        temp=_category_descriptors(struct, Category.TEMPERATURE, channels.temp),
        power=_category_descriptors(struct, Category.POWER, channels.power),
        freq=_category_descriptors(struct, Category.FREQUENCY, channels.freq),
        name=struct.name,
    )


class SchemaRegistry:
    """
    Lookup structure keyed by (format_revision, content_revision).

    Tables are grouped per format revision into ordered lists indexed by
    content revision.
    """

    def __init__(self, layout: Optional[VendorLayout] = None,
                 families: Optional[Dict[int, List[Tuple[str, RevisionChannels]]]] = None):
        """
        Build every SchemaTable.

        Args:
            layout: Vendor layouts (default: bundled layout data)
            families: format revision -> [(struct name, channels)]
        """
        self.layout = layout or load_layout()
        families = families if families is not None else REVISION_FAMILIES

        self._tables: Dict[int, List[SchemaTable]] = {}
        for format_revision, revisions in families.items():
            self._tables[format_revision] = [
                build_schema(self.layout.struct(name), format_revision,
                             content_revision, channels)
                for content_revision, (name, channels) in enumerate(revisions)
            ]

        logger.debug(
            f"Schema registry ready: {len(self.supported_revisions())} revisions"
        )

    def lookup(self, format_revision: int, content_revision: int) -> SchemaTable:
        """
        Get the SchemaTable of a revision.

        Raises:
            UnsupportedSchema: Unknown (format, content) pair
        """
        tables = self._tables.get(format_revision)
        if tables is None or not 0 <= content_revision < len(tables):
            raise UnsupportedSchema(format_revision, content_revision)
        return tables[content_revision]

    def supported_revisions(self) -> List[Tuple[int, int]]:
        return [
            (format_revision, content_revision)
            for format_revision, tables in sorted(self._tables.items())
            for content_revision in range(len(tables))
        ]

    def tables(self) -> List[SchemaTable]:
        return [self.lookup(f, c) for f, c in self.supported_revisions()]

    @property
    def max_size(self) -> int:
        """Largest declared size; bounds reads before the revision is known."""
        return max(table.declared_size for table in self.tables())

    @property
    def header(self) -> StructLayout:
        return self.layout.header

    @property
    def byte_order(self) -> str:
        return self.layout.byte_order


@lru_cache(maxsize=None)
def _registry_for(path: Optional[str]) -> SchemaRegistry:
    return SchemaRegistry(load_layout(path))


def default_registry(layout_path: Optional[Union[str, Path]] = None) -> SchemaRegistry:
    """Process-wide registry for a layout file (built once per file)."""
    return _registry_for(str(layout_path) if layout_path is not None else None)
