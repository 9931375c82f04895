"""
Request models and engine inputs: metric records, analysis config and rule overrides.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from config import HOSPITAL_ALIASES, Settings, settings as default_settings


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


class MetricRecord(BaseModel):
    """One hospital on one date.

    Built either from ``{"hospital", "date", "values"}`` or from a flat
    spreadsheet row where every non-identity column is an indicator.
    Non-numeric cells are kept as ``None``.
    """

    model_config = ConfigDict(frozen=True)

    hospital: str
    date: str
    values: Dict[str, Optional[float]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_flat_row(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if isinstance(data.get("values"), dict):
            values = {str(k): _as_number(v) for k, v in data["values"].items()}
            return {**data, "values": values}

        row = dict(data)
        hospital: Any = ""
        for alias in HOSPITAL_ALIASES:
            if alias in row:
                candidate = row.pop(alias)
                hospital = hospital or candidate
        date = row.pop("date", "")
        return {
            "hospital": "" if hospital is None else str(hospital),
            "date": "" if date is None else str(date),
            "values": {str(k): _as_number(v) for k, v in row.items()},
        }

    @property
    def key(self) -> Tuple[str, str]:
        return (self.hospital, self.date)

    def value(self, indicator: str) -> Optional[float]:
        return self.values.get(indicator)

    def to_row(self) -> Dict[str, Any]:
        return {"hospital": self.hospital, "date": self.date, **self.values}


class AnalysisConfig(BaseModel):
    """Resolved configuration snapshot for one analysis run.

    An empty ``api_key`` disables AI detection. ``anomaly_threshold`` is
    carried for API compatibility and is not read by the rule engines.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    api_key: str = Field(default="", repr=False)
    anomaly_threshold: float = 1.0
    timeseries_analysis: bool = True
    system_prompt: str = ""

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> AnalysisConfig:
        s = source or default_settings
        return cls(
            api_key=s.api_key,
            anomaly_threshold=s.anomaly_threshold,
            timeseries_analysis=s.timeseries_analysis,
            system_prompt=s.system_prompt,
        )


class RuleToggle(BaseModel):
    enabled: bool = False


class RuleOverrides(BaseModel):
    # same shape the settings page stores: toggles matched to rules by index
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    analysis_rules: Optional[List[RuleToggle]] = None
    cross_validation_rules: Optional[List[RuleToggle]] = None


class CrossRuleSpec(BaseModel):
    indicator1: str
    indicator2: str
    minimum: float = 0.0
    inclusive: bool = False
    message: str
    enabled: bool = True


class AnalyzeRequest(BaseModel):
    datasets: List[List[MetricRecord]] = Field(default_factory=list)
    config: Optional[AnalysisConfig] = None
    rule_overrides: Optional[RuleOverrides] = None
    extra_cross_rules: List[CrossRuleSpec] = Field(default_factory=list)
