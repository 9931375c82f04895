"""
Indicator extraction and positional predecessor lookup for hospital datasets.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from api.requests import MetricRecord
from config import IDENTITY_FIELDS


def extract_indicators(records: Sequence[MetricRecord]) -> List[str]:
    # every record in a dataset is assumed to carry the first record's columns
    if not records:
        return []
    return [name for name in records[0].values if name not in IDENTITY_FIELDS]


class SequenceIndex:
    """Maps each (hospital, date) key to its first position in dataset order.

    The predecessor of a record is the element right before it in the input,
    not the previous date. Callers wanting chronological comparison must sort
    the dataset first.
    """

    __slots__ = ("_records", "_positions")

    def __init__(self, records: Sequence[MetricRecord]) -> None:
        self._records = records
        self._positions: Dict[Tuple[str, str], int] = {}
        for position, record in enumerate(records):
            self._positions.setdefault(record.key, position)

    def position(self, record: MetricRecord) -> int:
        return self._positions.get(record.key, -1)

    def previous_value(self, record: MetricRecord, indicator: str) -> float:
        position = self.position(record)
        if position <= 0:
            return 0.0
        value = self._records[position - 1].value(indicator)
        return value if value is not None else 0.0


def previous_value(records: Sequence[MetricRecord], record: MetricRecord, indicator: str) -> float:
    return SequenceIndex(records).previous_value(record, indicator)
