from __future__ import annotations

from fastapi import APIRouter

from api.requests import AnalyzeRequest
from api.responses import AnalyzeResponse
from api.routes.exception import handle_exceptions
from services.analyze_service import run_analysis

router = APIRouter(tags=["Analysis"])


@router.post("/analyze", response_model=AnalyzeResponse, summary="Rule and AI anomaly analysis per hospital dataset")
@handle_exceptions
async def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
    return await run_analysis(req)
