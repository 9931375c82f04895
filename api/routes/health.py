"""
Health check route reporting service liveness and whether AI detection is configured.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "ai_enabled": bool(settings.api_key),
    }
