"""
Base connector for remote classification providers

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseConnector(ABC):

    def __init__(self, api_key: str, base_url: str, timeout: float = 60, headers: Optional[Dict[str, str]] = None):
        self.api_key = api_key
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    def key_prefix(self, length: int = 8) -> str:
        """Non-secret prefix of the key, safe to log. Never covers more than half the key."""
        return f"{self.api_key[:min(length, len(self.api_key) // 2)]}..."

    def _headers(self) -> Dict[str, str]:
        """Basic header set applied to every outbound request."""
        return {
            **self.headers,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }


class ChatConnector(BaseConnector):
    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]]) -> Any: ...
