"""
Constants and configuration for Connect.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Tuple

from pydantic_settings import BaseSettings


QUERY_TYPE_PROMETHEUS = "prometheus"
QUERY_TYPE_LOKI = "loki"
QUERY_TYPE_REST = "rest"

# upstream API paths
PROMETHEUS_QUERY_PATH = "/api/v1/query"
PROMETHEUS_QUERY_RANGE_PATH = "/api/v1/query_range"
LOKI_QUERY_RANGE_PATH = "/loki/api/v1/query_range"

ENVELOPE_SUCCESS = "success"

# keys recognised as row timestamps in REST payloads, checked in this order
TIMESTAMP_KEYS: Tuple[str, ...] = ("time", "timestamp", "date", "ts", "datetime")

# epoch values above this are milliseconds, below are seconds
EPOCH_MILLIS_THRESHOLD = 1e12

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

# max characters of an upstream body kept in error messages
ERROR_BODY_EXCERPT = 512

CONNECT_QUERY_TIMEOUT = int(os.getenv("CONNECT_QUERY_TIMEOUT", "30"))
CONNECT_HEALTH_TIMEOUT = int(os.getenv("CONNECT_HEALTH_TIMEOUT", "5"))
CONNECT_LOKI_LIMIT = int(os.getenv("CONNECT_LOKI_LIMIT", "1000"))
CONNECT_DEFAULT_STEP_SECONDS = int(os.getenv("CONNECT_DEFAULT_STEP_SECONDS", "15"))
CONNECT_MAX_PARALLEL_QUERIES = int(os.getenv("CONNECT_MAX_PARALLEL_QUERIES", "8"))
CONNECT_API_KEY_HEADER = os.getenv("CONNECT_API_KEY_HEADER", "X-API-Key")
CONNECT_METRICS_HEALTH_PATH = os.getenv("CONNECT_METRICS_HEALTH_PATH", "/-/healthy")


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 4323
    log_level: str = "info"

    # upstream timeouts in seconds
    query_timeout: int = CONNECT_QUERY_TIMEOUT
    health_timeout: int = CONNECT_HEALTH_TIMEOUT

    # loki result-count cap per query
    loki_limit: int = CONNECT_LOKI_LIMIT

    # step used for range queries when the query carries no interval
    default_step_seconds: int = CONNECT_DEFAULT_STEP_SECONDS

    # queries of one batch executing concurrently
    max_parallel_queries: int = CONNECT_MAX_PARALLEL_QUERIES

    api_key_header: str = CONNECT_API_KEY_HEADER
    metrics_health_path: str = CONNECT_METRICS_HEALTH_PATH

    model_config = {
        "env_prefix": "CONNECT_",
        "extra": "ignore",
    }


settings = Settings()
