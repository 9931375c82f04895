"""
Read-only view of the default rule registry.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from api.responses import RuleDescription
from engine.enums import FindingType
from engine.rules import DEFAULT_RULES, RuleSet

router = APIRouter(tags=["Rules"])


def describe(rules: RuleSet) -> List[RuleDescription]:
    out = [
        RuleDescription(
            kind=FindingType.single_indicator,
            name=rule.name,
            description=rule.description,
            enabled=rule.enabled,
        )
        for rule in rules.single
    ]
    out.extend(
        RuleDescription(
            kind=FindingType.cross_validation,
            name=rule.name,
            description=rule.message,
            enabled=rule.enabled,
        )
        for rule in rules.cross
    )
    return out


@router.get("/rules", response_model=List[RuleDescription])
async def list_rules() -> List[RuleDescription]:
    return describe(DEFAULT_RULES)
