"""
Rule registry: single-indicator stability rules, cross-validation consistency rules and the immutable RuleSet passed into every analysis run.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from config import (
    DISCHARGE_COUNT,
    DISCHARGE_INCOME_MESSAGE,
    HOSPITALIZATION_INCOME,
    MEDICAL_INCOME,
    SURGERY_COUNT,
    SURGERY_INCOME_MESSAGE,
    SURGERY_INCOME_MINIMUM,
    VOLATILITY_RULE_DESCRIPTION,
    VOLATILITY_RULE_NAME,
    settings,
)


@dataclass(frozen=True)
class RuleContext:
    previous_value: float = 0.0


@dataclass(frozen=True)
class SingleIndicatorRule:
    name: str
    description: str
    validate: Callable[[float, RuleContext], bool]
    enabled: bool = True


@dataclass(frozen=True)
class CrossValidationRule:
    indicator1: str
    indicator2: str
    validate: Callable[[float, float], bool]
    message: str
    enabled: bool = True

    @property
    def name(self) -> str:
        return f"{self.indicator1}/{self.indicator2}"


def volatility_rule(threshold: Optional[float] = None, enabled: bool = True) -> SingleIndicatorRule:
    if threshold is None:
        threshold = settings.volatility_threshold

    def _validate(current: float, ctx: RuleContext) -> bool:
        prev = ctx.previous_value
        # no baseline, no verdict
        if prev == 0:
            return True
        return abs(current - prev) / prev < threshold

    return SingleIndicatorRule(
        name=VOLATILITY_RULE_NAME,
        description=VOLATILITY_RULE_DESCRIPTION,
        validate=_validate,
        enabled=enabled,
    )


def requires_minimum(
    indicator1: str,
    indicator2: str,
    minimum: float,
    message: str,
    inclusive: bool = False,
    enabled: bool = True,
) -> CrossValidationRule:
    """Build a rule of the form "when indicator1 is positive, indicator2 must reach minimum".

    With ``inclusive`` the minimum itself passes (``value2 >= minimum``),
    otherwise ``value2`` must exceed it.
    """

    def _validate(value1: float, value2: float) -> bool:
        reached = value2 >= minimum if inclusive else value2 > minimum
        return not (value1 > 0 and not reached)

    return CrossValidationRule(
        indicator1=indicator1,
        indicator2=indicator2,
        validate=_validate,
        message=message,
        enabled=enabled,
    )


def _toggle(rules: Tuple[Any, ...], toggles: Optional[Sequence[Any]]) -> Tuple[Any, ...]:
    if toggles is None:
        return rules
    out = []
    for index, rule in enumerate(rules):
        # a rule without a stored toggle is treated as disabled
        entry = toggles[index] if index < len(toggles) else None
        out.append(dataclasses.replace(rule, enabled=_enabled_flag(entry)))
    return tuple(out)


def _enabled_flag(entry: Any) -> bool:
    if entry is None:
        return False
    if isinstance(entry, Mapping):
        return bool(entry.get("enabled", False))
    return bool(getattr(entry, "enabled", False))


@dataclass(frozen=True)
class RuleSet:
    single: Tuple[SingleIndicatorRule, ...] = field(default_factory=tuple)
    cross: Tuple[CrossValidationRule, ...] = field(default_factory=tuple)

    def with_overrides(
        self,
        analysis_rules: Optional[Sequence[Any]] = None,
        cross_validation_rules: Optional[Sequence[Any]] = None,
    ) -> RuleSet:
        return RuleSet(
            single=_toggle(self.single, analysis_rules),
            cross=_toggle(self.cross, cross_validation_rules),
        )

    def with_cross_rules(self, extra: Sequence[CrossValidationRule]) -> RuleSet:
        return RuleSet(single=self.single, cross=self.cross + tuple(extra))


def default_rules() -> RuleSet:
    return RuleSet(
        single=(volatility_rule(),),
        cross=(
            requires_minimum(
                DISCHARGE_COUNT,
                HOSPITALIZATION_INCOME,
                minimum=0.0,
                message=DISCHARGE_INCOME_MESSAGE,
            ),
            requires_minimum(
                SURGERY_COUNT,
                MEDICAL_INCOME,
                minimum=SURGERY_INCOME_MINIMUM,
                message=SURGERY_INCOME_MESSAGE,
                inclusive=True,
            ),
        ),
    )


DEFAULT_RULES = default_rules()
