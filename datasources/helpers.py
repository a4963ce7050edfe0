"""
Shared helper functions for data source connectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from config import ENVELOPE_SUCCESS
from datasources.exceptions import DataSourceUnavailable, ParseError, QueryTimeout, UpstreamStatusError


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


async def send_request(
    method: str,
    url: str,
    params: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    content: Optional[bytes] = None,
    timeout: float = 30,
    label: str = "data source",
) -> httpx.Response:
    """Issue one request; transport failures become connector errors, status is not checked."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(method, url, params=params, headers=headers, content=content)
    except httpx.TimeoutException as e:
        raise QueryTimeout(f"{label} request timed out after {timeout}s") from e
    except httpx.RequestError as e:
        raise DataSourceUnavailable(f"Cannot reach {label} at {url}: {e}") from e


async def fetch_json(
    url: str,
    params: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30,
    label: str = "data source",
    method: str = "GET",
    content: Optional[bytes] = None,
) -> Any:
    resp = await send_request(
        method, url, params=params, headers=headers, content=content, timeout=timeout, label=label
    )
    if not is_success(resp.status_code):
        raise UpstreamStatusError(
            f"{label} returned status {resp.status_code}", status_code=resp.status_code, body=resp.text
        )
    try:
        return resp.json()
    except ValueError as e:
        raise ParseError(f"failed to parse {label} JSON response: {e}") from e


async def probe(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 5,
    label: str = "data source",
) -> int:
    resp = await send_request("GET", url, headers=headers, timeout=timeout, label=label)
    if not is_success(resp.status_code):
        raise UpstreamStatusError(f"health check returned status {resp.status_code}", status_code=resp.status_code)
    return resp.status_code


def check_envelope(payload: Any, label: str = "data source") -> Dict[str, Any]:
    """Validate a Prometheus-style ``{"status": ..., "data": ...}`` envelope."""
    if not isinstance(payload, dict):
        raise ParseError(f"{label} response is not a JSON object")
    status = payload.get("status")
    if status != ENVELOPE_SUCCESS:
        detail = payload.get("error") or status
        raise UpstreamStatusError(f"{label} query failed: {detail}")
    data = payload.get("data")
    if not isinstance(data, dict):
        raise ParseError(f"{label} response has no data object")
    return data
