"""
Cross-validation rule evaluation: two-indicator consistency checks per record.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from api.requests import MetricRecord
from api.responses import CrossValidationFinding
from engine.rules import CrossValidationRule

log = logging.getLogger(__name__)


def evaluate(
    records: Sequence[MetricRecord],
    rules: Sequence[CrossValidationRule],
) -> List[CrossValidationFinding]:
    active = [r for r in rules if r.enabled]
    findings: List[CrossValidationFinding] = []

    for record in records:
        for rule in active:
            value1 = record.value(rule.indicator1)
            value2 = record.value(rule.indicator2)
            if value1 is None or value2 is None:
                log.debug("cross rule %s skipped for %s/%s: missing value",
                          rule.name, record.hospital, record.date)
                continue
            if rule.validate(value1, value2):
                continue
            findings.append(CrossValidationFinding(
                hospital=record.hospital,
                date=record.date,
                message=rule.message,
                values={rule.indicator1: value1, rule.indicator2: value2},
            ))

    return findings
