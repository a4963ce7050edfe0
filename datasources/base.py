"""
Base connectors and shared utilities for data sources

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from config import settings
from datasources.auth import apply_auth
from datasources.data_config import DataSourceConfig
from datasources.exceptions import ConfigurationError


class BaseConnector(ABC):
    health_path: str = ""
    label: str = "data source"

    def __init__(
        self,
        config: DataSourceConfig,
        base_url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if not base_url:
            raise ConfigurationError(f"{self.label} URL not configured")
        self.config = config
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.query_timeout
        self.headers = headers or {}

    @property
    def health_url(self) -> str:
        if not self.health_path:
            raise NotImplementedError("connector must define health_path")
        return f"{self.base_url}{self.health_path}"

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Header set applied to every outbound request, credentials last."""
        headers = {**self.headers, **(extra or {})}
        apply_auth(headers, self.config)
        return headers


class LogsConnector(BaseConnector):
    @abstractmethod
    async def query_range(
        self,
        query: str,
        start: int,
        end: int,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]: ...


class MetricsConnector(BaseConnector):
    @abstractmethod
    async def query_range(
        self,
        query: str,
        start: float,
        end: float,
        step: str,
    ) -> Dict[str, Any]: ...

    @abstractmethod
    async def query_instant(self, query: str, time: float) -> Dict[str, Any]: ...
