"""
Generic JSON REST connector.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any, Dict, Optional

from config import BODY_METHODS
from datasources.base import BaseConnector
from datasources.data_config import DataSourceConfig
from datasources.helpers import fetch_json


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def normalize_method(method: Optional[str]) -> str:
    return (method or "").strip().upper() or "GET"


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


class RestConnector(BaseConnector):
    label = "REST API"

    def __init__(
        self,
        config: DataSourceConfig,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(config, config.rest_url, timeout, headers if headers is not None else config.rest_headers)

    def build_request(
        self,
        endpoint: str,
        method: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        method = normalize_method(method)
        content = body.encode("utf-8") if body and method in BODY_METHODS else None

        extra = dict(headers or {})
        if content is not None and not _has_header({**self.headers, **extra}, "Content-Type"):
            extra["Content-Type"] = "application/json"

        return {
            "method": method,
            "url": join_url(self.base_url, endpoint),
            "headers": self._headers(extra),
            "content": content,
        }

    async def request(
        self,
        endpoint: str,
        method: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Any:
        req = self.build_request(endpoint, method=method, headers=headers, body=body)
        return await fetch_json(
            req["url"],
            headers=req["headers"],
            timeout=self.timeout,
            label=self.label,
            method=req["method"],
            content=req["content"],
        )
