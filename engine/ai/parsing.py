"""
Best-effort extraction of anomaly lists from free-form classifier output.

The classifier is asked for a JSON array but replies in prose; the first
top-level bracketed span is lifted out and parsed. Anything that does not
survive extraction yields ``None`` and the caller treats it as "no AI
findings". Only a structurally invalid completion envelope raises, because
that is a provider failure and is retried.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from api.responses import AIFinding
from config import AI_DEFAULT_MESSAGE, AI_UNKNOWN_DATE, AI_UNKNOWN_HOSPITAL
from providers.exceptions import MalformedResponse


def response_content(response: Any) -> Optional[str]:
    if not isinstance(response, Mapping):
        raise MalformedResponse("completion response is not an object")
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponse("completion response has no choices")
    first = choices[0]
    message = first.get("message") if isinstance(first, Mapping) else None
    content = message.get("content") if isinstance(message, Mapping) else None
    return content if isinstance(content, str) else None


def first_array_span(text: str) -> Optional[str]:
    start = text.find("[")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_array(text: Optional[str]) -> Optional[List[Any]]:
    if not text:
        return None
    span = first_array_span(text)
    if span is None:
        return None
    try:
        parsed = json.loads(span)
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


def _text(item: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if value:
            return str(value)
    return None


def to_finding(item: Mapping[str, Any]) -> AIFinding:
    value = item.get("value")
    numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
    return AIFinding(
        hospital=_text(item, "hospitalName", "hospital") or AI_UNKNOWN_HOSPITAL,
        date=_text(item, "date") or AI_UNKNOWN_DATE,
        indicator=_text(item, "indicator", "field"),
        value=float(value) if numeric else None,
        message=_text(item, "description", "message") or AI_DEFAULT_MESSAGE,
    )


def to_findings(items: List[Any]) -> List[AIFinding]:
    return [to_finding(item) for item in items if isinstance(item, Mapping)]
