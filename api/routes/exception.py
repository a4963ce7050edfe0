"""
Centralized exception handling decorator for API route functions.

:func:`handle_exceptions` wraps an async endpoint and maps whatever escapes it
onto :class:`fastapi.HTTPException`:

* ``HTTPException`` is propagated untouched.
* :class:`~datasources.exceptions.InvalidBatch` becomes a ``400``; it is the
  one failure that cannot be attached to a single query.
* Any other exception becomes a ``500`` with the exception message as detail.

Per-query failures never reach this layer; the router records them in the
result set.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar, cast

from fastapi import HTTPException

from datasources.exceptions import InvalidBatch

Endpoint = TypeVar("Endpoint", bound=Callable[..., Awaitable[Any]])

log = logging.getLogger(__name__)


def to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, InvalidBatch):
        log.warning("rejected batch: %s", exc)
        return HTTPException(status_code=400, detail=exc.describe())
    log.exception("unhandled error in route")
    return HTTPException(status_code=500, detail=str(exc))


def handle_exceptions(endpoint: Endpoint) -> Endpoint:
    @wraps(endpoint)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await endpoint(*args, **kwargs)
        except Exception as exc:
            err = to_http_error(exc)
            if err is exc:
                raise
            raise err from exc

    return cast(Endpoint, wrapper)
