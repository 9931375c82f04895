"""
Response models for API endpoints and engine findings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from engine.enums import FindingType


class FindingModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    hospital: str
    date: str

    @computed_field
    @property
    def label(self) -> str:
        return FindingType(self.type).label


class SingleIndicatorFinding(FindingModel):

    type: Literal["single_indicator"] = "single_indicator"
    indicator: str
    value: float
    rule: str


class CrossValidationFinding(FindingModel):

    type: Literal["cross_validation"] = "cross_validation"
    message: str
    values: Dict[str, float]


class AIFinding(FindingModel):

    type: Literal["ai_detection"] = "ai_detection"
    indicator: Optional[str] = None
    value: Optional[float] = None
    message: str


Finding = Annotated[
    Union[SingleIndicatorFinding, CrossValidationFinding, AIFinding],
    Field(discriminator="type"),
]


class RuleDescription(BaseModel):

    kind: FindingType
    name: str
    description: str
    enabled: bool


class AnalyzeResponse(BaseModel):

    findings: List[Finding] = Field(default_factory=list)
    total: int = 0
    counts: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_findings(cls, findings: List[Finding]) -> AnalyzeResponse:
        counts = {t.value: 0 for t in FindingType}
        for finding in findings:
            counts[FindingType(finding.type).value] += 1
        return cls(findings=list(findings), total=len(findings), counts=counts)
