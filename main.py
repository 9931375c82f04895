"""
Entry point for the MetricGuard Analysis Engine API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI

from api.routes import router
from config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


app = FastAPI(
    title="MetricGuard Analysis Engine",
    description="Rule-based and AI-assisted anomaly detection over hospital financial and operational metrics.",
    version="1.0.0",
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    log.info("AI detection %s", "enabled" if settings.api_key else "disabled (no api key)")
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level="info",
        access_log=True,
    )
