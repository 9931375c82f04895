"""
AI-assisted anomaly detection: sends a whole hospital dataset to a chat completion classifier and turns its reply into findings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from api.requests import AnalysisConfig, MetricRecord
from api.responses import AIFinding
from config import settings
from connectors.chat import ChatCompletionConnector
from engine.ai.parsing import extract_array, response_content, to_findings
from engine.ai.prompt import build_messages
from providers.base import ChatConnector
from providers.exceptions import ProviderTimeout
from providers.retry import retry

log = logging.getLogger(__name__)


def _failure_kind(exc: BaseException) -> str:
    kind = getattr(exc, "kind", None)
    return kind.value if kind is not None else type(exc).__name__


async def detect(
    records: Sequence[MetricRecord],
    config: AnalysisConfig,
    connector: Optional[ChatConnector] = None,
) -> List[AIFinding]:
    """Classify ``records`` remotely; never raises for provider or parsing failures.

    Each attempt is bounded by ``settings.ai_timeout_seconds``. Up to
    ``settings.ai_max_attempts`` attempts are made with a linear pause of
    ``attempt * settings.ai_backoff_seconds`` between them. Exhausted
    attempts and unparseable replies both yield an empty list.
    """
    if not config.api_key:
        log.info("AI api key not configured; skipping AI detection")
        return []
    if not records:
        return []

    if connector is None:
        connector = ChatCompletionConnector(api_key=config.api_key)
    messages = build_messages(records, config)
    attempts = max(1, int(settings.ai_max_attempts))
    timeout = settings.ai_timeout_seconds
    hospital = records[0].hospital

    def _log_retry(attempt: int, exc: Exception) -> None:
        log.warning(
            "AI detection attempt %d/%d failed for %s (%s): %s",
            attempt, attempts, hospital, _failure_kind(exc), exc,
        )

    @retry(
        attempts=attempts,
        delay=settings.ai_backoff_seconds,
        exceptions=(Exception,),
        on_retry=_log_retry,
    )
    async def _attempt() -> Optional[str]:
        try:
            response = await asyncio.wait_for(connector.complete(messages), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeout(f"AI detection attempt exceeded {timeout}s") from exc
        return response_content(response)

    try:
        content = await _attempt()
    except Exception as exc:
        log.error(
            "AI detection gave up after %d attempt(s) for %s (%s): %s; using rule findings only",
            attempts, hospital, _failure_kind(exc), exc,
        )
        return []

    items = extract_array(content)
    if items is None:
        log.warning("AI reply for %s contained no parseable anomaly array", hospital)
        return []

    findings = to_findings(items)
    log.info("AI detection for %s returned %d finding(s)", hospital, len(findings))
    return findings
