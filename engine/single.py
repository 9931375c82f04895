"""
Single-indicator rule evaluation over every record and indicator of a dataset.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from api.requests import MetricRecord
from api.responses import SingleIndicatorFinding
from engine.indicators import SequenceIndex, extract_indicators
from engine.rules import RuleContext, SingleIndicatorRule

log = logging.getLogger(__name__)


def evaluate(
    records: Sequence[MetricRecord],
    rules: Sequence[SingleIndicatorRule],
    indicators: Optional[Sequence[str]] = None,
) -> List[SingleIndicatorFinding]:
    if indicators is None:
        indicators = extract_indicators(records)
    active = [r for r in rules if r.enabled]
    if not records or not indicators or not active:
        return []

    index = SequenceIndex(records)
    findings: List[SingleIndicatorFinding] = []

    for record in records:
        for indicator in indicators:
            value = record.value(indicator)
            if value is None:
                continue
            ctx = RuleContext(previous_value=index.previous_value(record, indicator))
            for rule in active:
                if rule.validate(value, ctx):
                    continue
                findings.append(SingleIndicatorFinding(
                    hospital=record.hospital,
                    date=record.date,
                    indicator=indicator,
                    value=value,
                    rule=rule.name,
                ))

    log.debug("single-indicator evaluation: records=%d indicators=%d findings=%d",
              len(records), len(indicators), len(findings))
    return findings
