"""
Constants and configuration for MetricGuard.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Tuple

from pydantic_settings import BaseSettings


# identity columns of a hospital dataset; everything else is an indicator
IDENTITY_FIELDS: Tuple[str, ...] = ("hospital", "date")
# column name used by the spreadsheet ingestion for the hospital identifier
HOSPITAL_ALIASES: Tuple[str, ...] = ("hospital", "hospitalName")

METRICGUARD_AI_API_URL = os.getenv(
    "METRICGUARD_AI_API_URL",
    "https://ark.cn-beijing.volces.com/api/v3/chat/completions",
)
METRICGUARD_AI_MODEL = os.getenv("METRICGUARD_AI_MODEL", "deepseek-r1-250120")
METRICGUARD_AI_TIMEOUT = float(os.getenv("METRICGUARD_AI_TIMEOUT", "60"))
METRICGUARD_AI_MAX_ATTEMPTS = int(os.getenv("METRICGUARD_AI_MAX_ATTEMPTS", "3"))
METRICGUARD_AI_BACKOFF = float(os.getenv("METRICGUARD_AI_BACKOFF", "1.0"))

# the default rule registry
VOLATILITY_RULE_NAME = "波动率校验"
VOLATILITY_RULE_DESCRIPTION = "检查指标波动是否超过阈值"
DEFAULT_VOLATILITY_THRESHOLD = 0.30

DISCHARGE_COUNT = "出院人次"
HOSPITALIZATION_INCOME = "住院收入"
SURGERY_COUNT = "手术人数"
MEDICAL_INCOME = "医疗收入"

DISCHARGE_INCOME_MESSAGE = "出院人次大于0但住院收入为0或负数"
SURGERY_INCOME_MESSAGE = "有手术记录但医疗收入异常偏低"
SURGERY_INCOME_MINIMUM = 10000.0

# fallbacks used when the AI classifier omits identity fields
AI_UNKNOWN_HOSPITAL = "unknown hospital"
AI_UNKNOWN_DATE = "unknown date"
AI_DEFAULT_MESSAGE = "anomaly detected"

AI_USER_PROMPT_PREFIX = "请分析以下医疗数据中的异常情况："
AI_TIMESERIES_HINT = "以下数据为同一医院按记录顺序排列的时间序列，请结合前后期变化趋势判断异常。"


class Settings(BaseSettings):
    ai_api_url: str = METRICGUARD_AI_API_URL
    ai_model: str = METRICGUARD_AI_MODEL
    ai_timeout_seconds: float = METRICGUARD_AI_TIMEOUT
    ai_max_attempts: int = METRICGUARD_AI_MAX_ATTEMPTS
    # delay before retry n is n * ai_backoff_seconds
    ai_backoff_seconds: float = METRICGUARD_AI_BACKOFF
    ai_key_prefix_length: int = 8
    ai_user_prompt_prefix: str = AI_USER_PROMPT_PREFIX
    ai_timeseries_hint: str = AI_TIMESERIES_HINT

    # resolved analysis config defaults (see AnalysisConfig.from_settings)
    api_key: str = ""
    anomaly_threshold: float = 1.0
    timeseries_analysis: bool = True
    system_prompt: str = ""

    volatility_threshold: float = DEFAULT_VOLATILITY_THRESHOLD

    analyzer_max_parallel_datasets: int = 8

    server_host: str = "0.0.0.0"
    server_port: int = 4322

    model_config = {
        "env_prefix": "METRICGUARD_",
        "extra": "ignore",
    }


settings = Settings()
