"""
Test cases for the AI anomaly detector: key gating, retry and timeout behaviour, and reply parsing.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
import json

import pytest

from api.requests import AnalysisConfig
from conftest import make_records
from engine.ai import detect
from engine.ai.prompt import build_messages
from providers.base import ChatConnector
from providers.exceptions import ProviderServerError, ProviderUnavailable


def _reply(content):
    return {"choices": [{"message": {"content": content}}]}


class ScriptedConnector(ChatConnector):
    """Plays back one scripted outcome per call; exceptions are raised."""

    def __init__(self, *outcomes):
        super().__init__(api_key="sk-test-1234567890", base_url="http://ai.local")
        self.outcomes = list(outcomes)
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class HangingConnector(ChatConnector):
    def __init__(self):
        super().__init__(api_key="sk-test", base_url="http://ai.local")
        self.calls = 0

    async def complete(self, messages):
        self.calls += 1
        await asyncio.Event().wait()


CONFIG = AnalysisConfig(api_key="sk-test-1234567890", system_prompt="you audit hospitals")
RECORDS = make_records([{"date": "2024-01-01", "医疗收入": 100}])


@pytest.mark.asyncio
async def test_empty_key_makes_no_calls():
    connector = ScriptedConnector(_reply("[]"))
    out = await detect(RECORDS, AnalysisConfig(api_key=""), connector=connector)
    assert out == []
    assert connector.calls == []


@pytest.mark.asyncio
async def test_extracts_findings_from_noisy_reply():
    content = 'noise [{"hospital":"A","date":"2024-01-01","description":"x"}] trailing'
    connector = ScriptedConnector(_reply(content))
    out = await detect(RECORDS, CONFIG, connector=connector)
    assert len(out) == 1
    assert (out[0].hospital, out[0].date, out[0].message) == ("A", "2024-01-01", "x")
    assert out[0].type == "ai_detection"


@pytest.mark.asyncio
async def test_reply_without_array_yields_nothing_and_is_not_retried():
    connector = ScriptedConnector(_reply("everything looks normal"))
    assert await detect(RECORDS, CONFIG, connector=connector) == []
    assert len(connector.calls) == 1


@pytest.mark.asyncio
async def test_persistent_network_failure_stops_after_three_attempts(fast_retries):
    connector = ScriptedConnector(ProviderUnavailable("down"))
    out = await detect(RECORDS, CONFIG, connector=connector)
    assert out == []
    assert len(connector.calls) == 3
    # linear backoff: 1 unit after the first failure, 2 after the second
    assert fast_retries == [1.0, 2.0]


@pytest.mark.asyncio
async def test_recovers_after_transient_failures():
    connector = ScriptedConnector(
        ProviderServerError("503"),
        {"choices": []},
        _reply('[{"hospitalName": "B", "field": "住院收入", "value": -3}]'),
    )
    out = await detect(RECORDS, CONFIG, connector=connector)
    assert len(connector.calls) == 3
    assert out[0].hospital == "B"
    assert out[0].indicator == "住院收入"
    assert out[0].value == -3.0


@pytest.mark.asyncio
async def test_unexpected_errors_are_contained():
    connector = ScriptedConnector(RuntimeError("boom"))
    assert await detect(RECORDS, CONFIG, connector=connector) == []
    assert len(connector.calls) == 3


@pytest.mark.asyncio
async def test_each_attempt_is_bounded_by_timeout(monkeypatch):
    monkeypatch.setattr("config.settings.ai_timeout_seconds", 0.01)
    connector = HangingConnector()
    assert await detect(RECORDS, CONFIG, connector=connector) == []
    assert connector.calls == 3


@pytest.mark.asyncio
async def test_attempt_cap_follows_settings(monkeypatch):
    monkeypatch.setattr("config.settings.ai_max_attempts", 1)
    connector = ScriptedConnector(ProviderUnavailable("down"))
    await detect(RECORDS, CONFIG, connector=connector)
    assert len(connector.calls) == 1


@pytest.mark.asyncio
async def test_empty_dataset_is_not_sent():
    connector = ScriptedConnector(_reply("[]"))
    assert await detect([], CONFIG, connector=connector) == []
    assert connector.calls == []


def test_messages_carry_system_prompt_and_records():
    messages = build_messages(RECORDS, CONFIG)
    assert messages[0] == {"role": "system", "content": "you audit hospitals"}
    assert messages[1]["role"] == "user"
    payload = messages[1]["content"].split("：", 1)[1]
    assert json.loads(payload) == [{"hospital": "A", "date": "2024-01-01", "医疗收入": 100.0}]


def test_timeseries_flag_adds_hint():
    with_hint = build_messages(RECORDS, CONFIG)[1]["content"]
    plain = build_messages(RECORDS, CONFIG.model_copy(update={"timeseries_analysis": False}))[1]["content"]
    assert with_hint.endswith(plain)
    assert len(with_hint) > len(plain)
    assert plain.startswith("请分析以下医疗数据中的异常情况：")
