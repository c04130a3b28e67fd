"""
GPU Metrics Revisions Module - Initialization
=============================================

Snapshot revision knowledge: vendor struct layouts (YAML data), channel
building blocks and the Schema Registry built from both.

Components:
-----------
1. layout.py    - Vendor layout loader, C alignment offsets
2. channels.py  - Per-category channel maps and revision families
3. registry.py  - SchemaRegistry.lookup(format, content)

Usage:
------
from revisions import default_registry

registry = default_registry()
schema = registry.lookup(3, 0)

Author: Telemetry Team
Date: October 19, 2026
"""

from .layout import (
    DEFAULT_LAYOUT_PATH,
    FieldLayout,
    LayoutError,
    StructLayout,
    VendorLayout,
    load_layout,
    parse_layout,
)

from .channels import (
    REVISION_FAMILIES,
    RevisionChannels,
)

from .registry import (
    SchemaRegistry,
    build_schema,
    default_registry,
)

__all__ = [
    # Layouts
    "DEFAULT_LAYOUT_PATH",
    "FieldLayout",
    "LayoutError",
    "StructLayout",
    "VendorLayout",
    "load_layout",
    "parse_layout",
    # Channels
    "REVISION_FAMILIES",
    "RevisionChannels",
    # Registry
    "SchemaRegistry",
    "build_schema",
    "default_registry",
]
