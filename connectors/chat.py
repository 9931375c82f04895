# connectors/chat.py

import logging
from typing import Any, Dict, List, Optional

from config import settings
from providers.base import ChatConnector
from providers.exceptions import MalformedResponse
from providers.helpers import post_json

log = logging.getLogger(__name__)


class ChatCompletionConnector(ChatConnector):
    """OpenAI-compatible chat completion endpoint (bearer authorization)."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url or settings.ai_api_url,
            timeout=settings.ai_timeout_seconds if timeout is None else timeout,
            headers=headers,
        )
        self.model = model or settings.ai_model

    async def complete(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        payload = {"model": self.model, "messages": messages}
        log.debug(
            "chat completion request url=%s model=%s timeout=%ss auth=Bearer %s",
            self.base_url,
            self.model,
            self.timeout,
            self.key_prefix(settings.ai_key_prefix_length),
        )
        body = await post_json(
            self.base_url,
            payload,
            headers=self._headers(),
            timeout=self.timeout,
            failed_msg="chat completion failed",
            timeout_msg="chat completion timed out",
            unavailable_msg="Cannot reach chat completion provider at",
        )
        if not isinstance(body, dict):
            raise MalformedResponse("chat completion response is not an object")
        log.debug("chat completion response keys=%s", sorted(body))
        return body
