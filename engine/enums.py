"""
Enumerations for Finding Types and Provider Failure Kinds

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

_FINDING_LABELS = {
    "single_indicator": "单指标异常",
    "cross_validation": "关联性异常",
    "ai_detection": "深度学习检测",
}


class FindingType(str, Enum):
    single_indicator = "single_indicator"
    cross_validation = "cross_validation"
    ai_detection = "ai_detection"

    @property
    def label(self) -> str:
        return _FINDING_LABELS[self.value]


class FailureKind(str, Enum):
    authentication = "authentication"
    rate_limited = "rate_limited"
    server_error = "server_error"
    invalid_request = "invalid_request"
    timeout = "timeout"
    unavailable = "unavailable"
    malformed_response = "malformed_response"
