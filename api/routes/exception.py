"""
Centralized exception handling decorator for API route functions.

The :func:`handle_exceptions` decorator wraps an endpoint handler and turns
uncaught exceptions into :class:`fastapi.HTTPException` responses.
HTTPExceptions raised by the handler pass through untouched. A ``TypeError``
or ``ValueError`` means the submitted dataset is structurally invalid and maps
to ``422``; a provider failure that escaped the engine maps to ``502``;
anything else becomes ``500``. The exception message is the response detail.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from providers.exceptions import ProviderError

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def _status_for(exc: Exception) -> int:
    if isinstance(exc, (TypeError, ValueError)):
        return 422
    if isinstance(exc, ProviderError):
        return 502
    return 500


def _translate(func: Callable[..., Any], exc: Exception) -> HTTPException:
    status_code = _status_for(exc)
    log.error("%s failed with %d: %s", func.__name__, status_code, exc)
    return HTTPException(status_code=status_code, detail=str(exc))


def handle_exceptions(func: F) -> F:
    """Decorator that converts uncaught exceptions to HTTP errors.

    Works with both regular and async functions.
    """

    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                raise _translate(func, exc) from exc

        return cast(F, async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as exc:
            raise _translate(func, exc) from exc

    return cast(F, sync_wrapper)
