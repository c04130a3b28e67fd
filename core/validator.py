"""
GPU Metrics Core - Channel Validator
====================================

Runs the field decoder over every slot of a category and records which
channels are usable.

Per-slot Policy:
----------------
1. No descriptor in this revision       -> invalid
2. Decoder reports ChannelUnavailable   -> invalid
3. Temperature decoding exactly 0       -> invalid
   Power/frequency decoding 0           -> provisionally valid (per-core
                                           slots are judged later by the
                                           CoreFunctionalityDetector)
4. Otherwise                            -> valid

Every slot receives label_index = slot; per-core slots may be renumbered
later. The resulting table always has the category's fixed slot count.

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
from typing import Dict, Optional

from .decoder import Buffer, FieldDecoder
from .errors import ChannelUnavailable
from .types import Category, RemapTable, SchemaTable

logger = logging.getLogger(__name__)


class ChannelValidator:
    """
    Builds RemapTables from one snapshot buffer.

    Example:
    --------
    >>> validator = ChannelValidator(FieldDecoder())
    >>> tables = validator.validate_all(snapshot.data, schema)
    >>> tables[Category.TEMPERATURE].valid_slots()
    [1, 2, 4]
    """

    def __init__(self, decoder: Optional[FieldDecoder] = None):
        self.decoder = decoder or FieldDecoder()

    def validate(self, buffer: Buffer, schema: SchemaTable,
                 category: Category) -> RemapTable:
        """
        Validate every slot of one category.

        Args:
            buffer: Snapshot bytes
            schema: Schema table of the snapshot's revision
            category: Category to validate

        Returns:
            Dense RemapTable covering every slot

        Raises:
            MalformedDescriptor: If a descriptor of the schema is broken
        """
        table = RemapTable(category)

        for slot, descriptor in enumerate(schema.descriptors(category)):
            valid = (descriptor is not None and
                     self._check(buffer, descriptor, category, slot))
            table.set(slot, valid=valid, external=False, label_index=slot)

        return table

    def _check(self, buffer: Buffer, descriptor, category: Category,
               slot: int) -> bool:
        label = category.labels[slot]
        try:
            value = self.decoder.decode(buffer, descriptor)
        except ChannelUnavailable as e:
            logger.debug(f"'{label}' ({category.value}) unavailable: {e}")
            return False

        if category.zero_is_invalid and value == 0:
            logger.debug(f"'{label}' ({category.value}) unavailable: value is 0")
            return False

        return True

    def validate_all(self, buffer: Buffer,
                     schema: SchemaTable) -> Dict[Category, RemapTable]:
        """Validate temperature, power and frequency."""
        return {
            category: self.validate(buffer, schema, category)
            for category in Category
        }
