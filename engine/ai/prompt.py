from __future__ import annotations

import json
from typing import Dict, List, Sequence

from api.requests import AnalysisConfig, MetricRecord
from config import settings


def records_payload(records: Sequence[MetricRecord]) -> str:
    return json.dumps([r.to_row() for r in records], ensure_ascii=False)


def build_messages(records: Sequence[MetricRecord], config: AnalysisConfig) -> List[Dict[str, str]]:
    user = settings.ai_user_prompt_prefix + records_payload(records)
    if config.timeseries_analysis:
        user = f"{settings.ai_timeseries_hint}\n{user}"
    return [
        {"role": "system", "content": config.system_prompt},
        {"role": "user", "content": user},
    ]
