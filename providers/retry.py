"""
Retry decorator for provider calls.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Tuple, cast

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def retry(
    *,
    attempts: int = 3,
    delay: float = 1.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception], None]] = None,
) -> Callable[[F], F]:
    """Retry a coroutine function, pausing ``delay * n`` seconds after the n-th failure."""
    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            _attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as exc:
                    _attempt += 1
                    if _attempt >= attempts:
                        raise
                    if on_retry is not None:
                        on_retry(_attempt, exc)
                    await asyncio.sleep(delay * _attempt)

        return cast(F, wrapper)

    return decorator
