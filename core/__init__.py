"""
GPU Metrics Core Module - Initialization
========================================

Core module turns one gpu_metrics snapshot into validated sensor channels.

Components:
-----------
1. types.py     - Widths, descriptors, categories, schema and remap tables
2. labels.py    - Fixed label tables (31 temperature, 24 power, 43 frequency)
3. decoder.py   - Sentinel-aware field decoder with one-shot fallback
4. validator.py - Per-category validity/label remap tables
5. detector.py  - Functional vs dummy CPU core classification
6. placement.py - Per-core channels on a separate device
7. errors.py    - Error taxonomy

Usage:
------
from core import ChannelValidator, CoreFunctionalityDetector, FieldDecoder

decoder = FieldDecoder()
tables = ChannelValidator(decoder).validate_all(data, schema)
report = CoreFunctionalityDetector(decoder).detect(data, schema, tables)

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
"""

from .errors import (
    MetricsError,
    UnsupportedSchema,
    SizeMismatch,
    MalformedDescriptor,
    ChannelUnavailable,
    NoFunctionalCores,
    SourceReadError,
)

from .labels import (
    NCORES,
    TEMP_LABELS,
    POWER_LABELS,
    FREQ_LABELS,
)

from .types import (
    Width,
    ChannelDescriptor,
    Category,
    SchemaTable,
    RemapEntry,
    RemapTable,
)

from .decoder import (
    FieldDecoder,
    read_unsigned,
)

from .validator import ChannelValidator

from .detector import (
    CoreFunctionalityDetector,
    CoreReport,
)

from .placement import split_per_core

__all__ = [
    # Errors
    "MetricsError",
    "UnsupportedSchema",
    "SizeMismatch",
    "MalformedDescriptor",
    "ChannelUnavailable",
    "NoFunctionalCores",
    "SourceReadError",
    # Labels
    "NCORES",
    "TEMP_LABELS",
    "POWER_LABELS",
    "FREQ_LABELS",
    # Types
    "Width",
    "ChannelDescriptor",
    "Category",
    "SchemaTable",
    "RemapEntry",
    "RemapTable",
    # Decoding
    "FieldDecoder",
    "read_unsigned",
    "ChannelValidator",
    "CoreFunctionalityDetector",
    "CoreReport",
    "split_per_core",
]

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"
