import os
import sys
from typing import Any, Dict, List

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from api.requests import MetricRecord


@pytest.fixture(autouse=True)
def fast_retries(monkeypatch):
    """Keep retry pauses out of the test run and record what they would have been."""
    import providers.retry as retry_mod

    delays: List[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(retry_mod.asyncio, "sleep", fake_sleep)
    yield delays


def make_records(rows: List[Dict[str, Any]], hospital: str = "A") -> List[MetricRecord]:
    return [MetricRecord.model_validate({"hospital": hospital, **row}) for row in rows]
