"""
Shared helper functions for provider connectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from providers.exceptions import MalformedResponse, ProviderTimeout, ProviderUnavailable, for_status

_DETAIL_LIMIT = 300


async def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 60,
    failed_msg: str = "request failed",
    timeout_msg: str = "request timed out",
    unavailable_msg: str = "Cannot reach provider at",
) -> Any:
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise for_status(status, f"{failed_msg} [{status}]: {e.response.text[:_DETAIL_LIMIT]}") from e
    except httpx.TimeoutException as e:
        raise ProviderTimeout(timeout_msg) from e
    except httpx.RequestError as e:
        raise ProviderUnavailable(f"{unavailable_msg} {url}") from e
    except ValueError as e:
        raise MalformedResponse(f"{failed_msg}: response body is not JSON") from e
