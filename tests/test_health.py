from __future__ import annotations

import httpx
import pytest

from datasources.data_config import DataSourceConfig
from engine.health import NO_URLS_MESSAGE, READY_MESSAGE, HealthStatus, check_health


@pytest.mark.asyncio
async def test_no_urls_is_a_configuration_error(fake_http):
    result = await check_health(DataSourceConfig())
    assert result.status == HealthStatus.error
    assert result.message == NO_URLS_MESSAGE
    assert result.error_kind == "ConfigurationError"
    assert fake_http.calls == []


@pytest.mark.asyncio
async def test_healthy_prometheus(fake_http):
    fake_http.respond_text("Prometheus Server is Healthy.")
    result = await check_health(DataSourceConfig(prometheus_url="http://prom:9090", api_key="k"))
    assert result.status == HealthStatus.ok
    assert result.message == READY_MESSAGE
    assert str(fake_http.last.url) == "http://prom:9090/-/healthy"
    assert fake_http.last.headers["X-API-Key"] == "k"
    assert fake_http.timeouts == [5]


@pytest.mark.asyncio
async def test_unhealthy_status(fake_http):
    fake_http.respond_text("down", status_code=503)
    result = await check_health(DataSourceConfig(prometheus_url="http://prom:9090"))
    assert result.status == HealthStatus.error
    assert result.message == "Prometheus connection issue: health check returned status 503"
    assert result.error_kind == "UpstreamStatusError"


@pytest.mark.asyncio
async def test_unreachable_prometheus(fake_http):
    fake_http.raise_error(httpx.ConnectError("connection refused"))
    result = await check_health(DataSourceConfig(prometheus_url="http://prom:9090"))
    assert result.status == HealthStatus.error
    assert result.message.startswith("Prometheus connection issue: Cannot reach Prometheus")
    assert result.error_kind == "TransportError"


@pytest.mark.asyncio
async def test_only_loki_or_rest_configured_is_ok_without_probe(fake_http):
    result = await check_health(DataSourceConfig(loki_url="http://loki:3100"))
    assert result.status == HealthStatus.ok
    assert fake_http.calls == []


@pytest.mark.asyncio
async def test_explicit_timeout_is_used(fake_http):
    await check_health(DataSourceConfig(prometheus_url="http://prom"), timeout=1.5)
    assert fake_http.timeouts == [1.5]
