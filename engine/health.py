"""
Connectivity probe for a configured data source instance.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import settings
from datasources.data_config import DataSourceConfig
from datasources.exceptions import ConfigurationError, DataSourceError
from datasources.factory import DataSourceFactory

log = logging.getLogger(__name__)

NO_URLS_MESSAGE = "No data source URLs configured. Please configure at least one data source."
READY_MESSAGE = "Data source is ready"


class HealthStatus(str, Enum):
    ok = "OK"
    error = "ERROR"


@dataclass(frozen=True)
class HealthResult:
    status: HealthStatus
    message: str
    error_kind: Optional[str] = None


async def check_health(config: DataSourceConfig, timeout: Optional[float] = None) -> HealthResult:
    if not config.has_any_url:
        return HealthResult(HealthStatus.error, NO_URLS_MESSAGE, ConfigurationError.kind)

    if config.prometheus_url:
        connector = DataSourceFactory.create_metrics(config)
        try:
            code = await connector.check_health(timeout if timeout is not None else settings.health_timeout)
        except DataSourceError as exc:
            log.warning("Prometheus health check failed: %s", exc)
            return HealthResult(HealthStatus.error, f"Prometheus connection issue: {exc}", exc.kind)
        log.info("Prometheus health check passed (status %d)", code)

    return HealthResult(HealthStatus.ok, READY_MESSAGE)
