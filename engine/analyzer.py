"""
Aggregator for one hospital dataset: single-indicator rules, cross-validation rules and, when configured, AI detection, merged in that order.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from api.requests import AnalysisConfig, MetricRecord
from api.responses import Finding
from engine import ai, cross, single
from engine.indicators import extract_indicators
from engine.rules import DEFAULT_RULES, RuleSet
from providers.base import ChatConnector

log = logging.getLogger(__name__)


async def run(
    records: Sequence[MetricRecord],
    config: AnalysisConfig,
    rules: Optional[RuleSet] = None,
    connector: Optional[ChatConnector] = None,
) -> List[Finding]:
    if not isinstance(records, (list, tuple)):
        raise TypeError(f"dataset must be a list of MetricRecord, got {type(records).__name__}")
    if rules is None:
        rules = DEFAULT_RULES

    indicators = extract_indicators(records)

    findings: List[Finding] = []
    findings.extend(single.evaluate(records, rules.single, indicators))
    findings.extend(cross.evaluate(records, rules.cross))
    rule_count = len(findings)

    if config.ai_enabled:
        try:
            findings.extend(await ai.detect(records, config, connector=connector))
        except Exception as exc:
            log.error("AI detection raised unexpectedly: %s", exc)

    log.info(
        "analysis hospital=%s records=%d indicators=%d rule_findings=%d ai_findings=%d",
        records[0].hospital if records else "-",
        len(records),
        len(indicators),
        rule_count,
        len(findings) - rule_count,
    )
    return findings
