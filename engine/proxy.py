"""
Raw resource passthrough to a configured backend.

Method, headers, body and query string are forwarded verbatim with the
instance credentials applied; status, headers and body come back verbatim.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from config import QUERY_TYPE_LOKI, QUERY_TYPE_PROMETHEUS, QUERY_TYPE_REST, settings
from connectors.rest import join_url
from datasources.auth import apply_auth
from datasources.data_config import DataSourceConfig
from datasources.exceptions import TransportError
from datasources.factory import DataSourceFactory
from datasources.helpers import send_request

log = logging.getLogger(__name__)

BACKEND_LABELS: Dict[str, str] = {
    QUERY_TYPE_PROMETHEUS: "Prometheus",
    QUERY_TYPE_LOKI: "Loki",
    QUERY_TYPE_REST: "REST API",
}

# never forwarded in either direction; the transport sets its own
HOP_BY_HOP = frozenset(
    {
        "host",
        "connection",
        "keep-alive",
        "transfer-encoding",
        "content-length",
        "content-encoding",
        "upgrade",
        "te",
        "trailer",
        "proxy-authorization",
        "proxy-authenticate",
    }
)


@dataclass
class ProxyResponse:
    status: int
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


def _error(status: int, message: str) -> ProxyResponse:
    return ProxyResponse(
        status=status,
        headers=[("content-type", "application/json")],
        body=json.dumps({"error": message}).encode("utf-8"),
    )


def _filter(headers: Iterable[Tuple[str, str]]) -> List[Tuple[str, str]]:
    return [(k, v) for k, v in headers if k.lower() not in HOP_BY_HOP]


async def forward(
    config: DataSourceConfig,
    backend: str,
    path: str,
    method: str,
    headers: Iterable[Tuple[str, str]] = (),
    body: Optional[bytes] = None,
    query_string: str = "",
    timeout: Optional[float] = None,
) -> ProxyResponse:
    label = BACKEND_LABELS.get(backend)
    if label is None:
        return _error(404, "Unknown resource path")

    base_url = DataSourceFactory.base_url(config, backend)
    if not base_url:
        return _error(400, f"{label} base URL not configured")

    url = join_url(base_url, path)
    if query_string:
        url = f"{url}?{query_string}"

    out_headers: Dict[str, str] = {}
    for k, v in _filter(headers):
        out_headers[k] = v
    apply_auth(out_headers, config)

    log.debug("proxy %s %s -> %s", method, backend, url)
    try:
        resp = await send_request(
            method.upper(),
            url,
            headers=out_headers,
            content=body or None,
            timeout=timeout if timeout is not None else settings.query_timeout,
            label=label,
        )
    except TransportError as exc:
        log.warning("proxy request to %s failed: %s", label, exc)
        return _error(500, f"Request failed: {exc}")

    return ProxyResponse(status=resp.status_code, headers=_filter(resp.headers.multi_items()), body=resp.content)
