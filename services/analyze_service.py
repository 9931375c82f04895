"""
Analyze service: resolves the rule set and config for a request and runs one analysis per hospital dataset concurrently.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from api.requests import AnalysisConfig, AnalyzeRequest, MetricRecord
from api.responses import AnalyzeResponse, Finding
from config import settings
from engine.analyzer import run
from engine.rules import DEFAULT_RULES, RuleSet, requires_minimum

log = logging.getLogger(__name__)


def resolve_rules(req: AnalyzeRequest, base: RuleSet = DEFAULT_RULES) -> RuleSet:
    rules = base
    if req.rule_overrides is not None:
        rules = rules.with_overrides(
            req.rule_overrides.analysis_rules,
            req.rule_overrides.cross_validation_rules,
        )
    if req.extra_cross_rules:
        rules = rules.with_cross_rules([
            requires_minimum(
                extra.indicator1,
                extra.indicator2,
                minimum=extra.minimum,
                message=extra.message,
                inclusive=extra.inclusive,
                enabled=extra.enabled,
            )
            for extra in req.extra_cross_rules
        ])
    return rules


async def analyze_datasets(
    datasets: Sequence[Sequence[MetricRecord]],
    config: AnalysisConfig,
    rules: RuleSet = DEFAULT_RULES,
) -> List[Finding]:
    # datasets are independent; results are concatenated in input order
    sem = asyncio.Semaphore(max(1, int(settings.analyzer_max_parallel_datasets)))

    async def _one(records: Sequence[MetricRecord]) -> List[Finding]:
        async with sem:
            return await run(records, config, rules)

    results = await asyncio.gather(*[_one(records) for records in datasets])
    return [finding for result in results for finding in result]


async def run_analysis(req: AnalyzeRequest) -> AnalyzeResponse:
    config = req.config or AnalysisConfig.from_settings()
    findings = await analyze_datasets(req.datasets, config, resolve_rules(req))
    log.info("analyzed %d dataset(s): %d finding(s)", len(req.datasets), len(findings))
    return AnalyzeResponse.from_findings(findings)
