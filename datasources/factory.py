"""
Factory for creating data source connectors from an instance configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Optional

from config import QUERY_TYPE_LOKI, QUERY_TYPE_PROMETHEUS, QUERY_TYPE_REST
from connectors.loki import LokiConnector
from connectors.prometheus import PrometheusConnector
from connectors.rest import RestConnector
from datasources.data_config import DataSourceConfig


class DataSourceFactory:

    @staticmethod
    def create_metrics(config: DataSourceConfig, timeout: Optional[float] = None):
        return PrometheusConnector(config, timeout=timeout)

    @staticmethod
    def create_logs(config: DataSourceConfig, timeout: Optional[float] = None):
        return LokiConnector(config, timeout=timeout)

    @staticmethod
    def create_rest(config: DataSourceConfig, timeout: Optional[float] = None):
        return RestConnector(config, timeout=timeout)

    @staticmethod
    def base_url(config: DataSourceConfig, backend: str) -> Optional[str]:
        urls = {
            QUERY_TYPE_PROMETHEUS: config.prometheus_url,
            QUERY_TYPE_LOKI: config.loki_url,
            QUERY_TYPE_REST: config.rest_url,
        }
        return urls.get(backend)
