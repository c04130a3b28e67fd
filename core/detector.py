"""
GPU Metrics Core - Core Functionality Detector
==============================================

Tells functional CPU cores apart from factory-disabled (dummy) cores.

Dummy cores still show up in the per-core arrays of the snapshot, but they
are power and clock gated: they report 0 mW and 0 MHz. Power/frequency zero
is therefore judged here, per core, instead of in the validator.

Classification (per physical core k):
-------------------------------------
    P  = power slot valid and value > 0
    F  = freq slot valid and value > 0
    Pu = power slot invalid
    Fu = freq slot invalid

    functional = (P and F) or (P and Fu) or (Pu and F) or (Pu and Fu)

Both unavailable counts as functional: missing instrumentation is not
evidence of a disabled core. Cores whose three slots are all invalid are
skipped entirely.

Renumbering:
------------
Functional cores receive dense label indices starting at each category's
first per-core label, in ascending physical order, in all three tables.
Dummy cores have all three entries invalidated.

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .decoder import Buffer, FieldDecoder
from .errors import NoFunctionalCores
from .labels import NCORES
from .types import Category, RemapTable, SchemaTable

logger = logging.getLogger(__name__)


@dataclass
class CoreReport:
    """Outcome of core detection."""

    tables: Dict[Category, RemapTable]
    functional: int
    dummy: int


class CoreFunctionalityDetector:
    """
    Post-processes the per-core run of the three RemapTables.

    Example:
    --------
    >>> detector = CoreFunctionalityDetector(FieldDecoder())
    >>> report = detector.detect(snapshot.data, schema, tables)
    >>> report.functional
    8
    """

    def __init__(self, decoder: Optional[FieldDecoder] = None):
        self.decoder = decoder or FieldDecoder()

    def _positive(self, buffer: Buffer, schema: SchemaTable,
                  table: RemapTable, core: int) -> Optional[bool]:
        """
        Re-decode one per-core power/frequency slot.

        Returns:
            None if the slot is unavailable, otherwise whether value > 0
        """
        category = table.category
        if not table.core_entry(core).valid:
            return None
        descriptor = schema.core_descriptors(category)[core]
        if descriptor is None:
            return None
        value = self.decoder.try_decode(buffer, descriptor)
        if value is None:
            return None
        return value > 0

    def detect(self, buffer: Buffer, schema: SchemaTable,
               tables: Dict[Category, RemapTable]) -> CoreReport:
        """
        Classify cores and renumber per-core labels.

        Args:
            buffer: Snapshot bytes the tables were validated against
            schema: Schema table of the snapshot's revision
            tables: Output of ChannelValidator.validate_all (not modified)

        Returns:
            CoreReport with updated copies of the tables

        Raises:
            NoFunctionalCores: If no core is functional; the exception
                carries the downgraded tables
        """
        tables = {category: table.copy() for category, table in tables.items()}
        temp = tables[Category.TEMPERATURE]
        power = tables[Category.POWER]
        freq = tables[Category.FREQUENCY]

        next_label = {category: category.core_offset for category in Category}
        functional = 0
        dummy = 0

        for core in range(NCORES):
            if not (temp.core_entry(core).valid or
                    power.core_entry(core).valid or
                    freq.core_entry(core).valid):
                continue

            p = self._positive(buffer, schema, power, core)
            f = self._positive(buffer, schema, freq, core)

            # None: unavailable, True: > 0, False: reads 0
            core_functional = (
                (p is True and f is True) or
                (p is True and f is None) or
                (p is None and f is True) or
                (p is None and f is None)
            )

            for category, table in tables.items():
                slot = category.core_offset + core
                if core_functional:
                    table.set(slot, label_index=next_label[category])
                    next_label[category] += 1
                else:
                    table.set(slot, valid=False)

            if core_functional:
                functional += 1
            else:
                dummy += 1

        if functional or dummy:
            logger.debug(
                f"This APU has {functional} functional CPU cores and {dummy} dummy cores"
            )

        if not functional:
            raise NoFunctionalCores(tables, dummy=dummy)

        return CoreReport(tables=tables, functional=functional, dummy=dummy)
