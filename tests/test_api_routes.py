"""
Tests for the query, health and resource route semantics.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

import main as app_main
from api.requests import HealthCheckRequest, QueryDataRequest
from api.routes import health as health_route
from api.routes import query as query_route
from api.routes.common import get_default_config, resolve_config

RANGE = {"from": "2024-01-01T00:00:00Z", "to": "2024-01-01T01:00:00Z"}


@pytest.mark.asyncio
async def test_query_route_returns_one_result_per_ref_id(fake_http):
    fake_http.respond_json({"cpu": 42, "status": "ok"})
    req = QueryDataRequest(
        config={"restUrl": "http://api.example.com"},
        queries=[
            {"refId": "A", "queryType": "rest", "timeRange": RANGE, "restEndpoint": "/stats"},
            {"refId": "B", "queryType": "graphite", "timeRange": RANGE},
        ],
    )
    resp = await query_route.query_data(req, None)

    assert set(resp.results) == {"A", "B"}
    fields = resp.results["A"].frames[0].fields
    assert [(f.name, f.type, f.values) for f in fields] == [("cpu", "number", [42]), ("status", "string", ["ok"])]
    assert resp.results["A"].frames[0].meta == {"type": "table"}
    assert resp.results["B"].frames is None
    assert resp.results["B"].error_kind == "UnsupportedQueryTypeError"


@pytest.mark.asyncio
async def test_query_route_rejects_batch_without_ref_id():
    req = QueryDataRequest(queries=[{"queryType": "rest", "timeRange": RANGE}])
    with pytest.raises(HTTPException) as exc:
        await query_route.query_data(req, None)
    assert exc.value.status_code == 400
    assert exc.value.detail == "InvalidBatch: query at position 0 has no refId"


@pytest.mark.asyncio
async def test_health_check_route_uses_instance_settings(fake_http):
    fake_http.respond_text("ok")
    req = HealthCheckRequest(
        jsonData={"prometheusUrl": "http://prom:9090"},
        secureJsonData={"bearerToken": "secret"},
    )
    resp = await health_route.health_check(req)
    assert resp.status == "OK"
    assert resp.message == "Data source is ready"
    assert fake_http.last.headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_health_check_route_without_body_uses_default_instance(fake_http):
    resp = await health_route.health_check(None)
    assert resp.status == "ERROR"
    assert resp.error_kind == "ConfigurationError"


def test_resolve_config_prefers_snapshot_then_settings_then_environment(monkeypatch):
    monkeypatch.setenv("CONNECT_LOKI_URL", "http://env-loki:3100/")
    assert resolve_config(None).loki_url == "http://env-loki:3100"
    assert resolve_config(None) is get_default_config()

    snapshot = HealthCheckRequest(config={"lokiUrl": "http://snap"}, jsonData={"lokiUrl": "http://raw"})
    assert resolve_config(snapshot).loki_url == "http://snap"

    raw = HealthCheckRequest(jsonData={"lokiUrl": "http://raw"})
    assert resolve_config(raw).loki_url == "http://raw"


def test_http_wiring(fake_http, monkeypatch):
    monkeypatch.setenv("CONNECT_PROMETHEUS_URL", "http://prom:9090")
    fake_http.handler = lambda request: httpx.Response(200, json={"status": "success", "data": ["up"]})

    client = TestClient(app_main.app)

    assert client.get("/api/v1/health").json() == {"status": "ok"}

    resp = client.post("/api/v1/query", json={"queries": [{"refId": "A", "queryType": "loki", "timeRange": RANGE}]})
    assert resp.status_code == 200
    assert resp.json() == {
        "results": {"A": {"error": "ConfigurationError: Loki URL not configured", "errorKind": "ConfigurationError"}}
    }

    resp = client.post("/api/v1/query", json={"queries": [{"refId": "A"}, {"refId": "A"}]})
    assert resp.status_code == 400

    resp = client.get("/api/v1/resources/prometheus/api/v1/label/__name__/values?match=up")
    assert resp.status_code == 200
    assert resp.json() == {"status": "success", "data": ["up"]}
    assert str(fake_http.last.url) == "http://prom:9090/api/v1/label/__name__/values?match=up"

    assert client.get("/api/v1/resources/tempo/api/search").status_code == 404


def test_bad_series_labels_only_fail_their_own_query(fake_http):
    def upstream(request: httpx.Request) -> httpx.Response:
        if request.url.host == "prom":
            return httpx.Response(
                200,
                json={
                    "status": "success",
                    "data": {
                        "resultType": "matrix",
                        "result": [{"metric": {"__name__": "up", "shard": 3}, "values": [[1704067200, "1"]]}],
                    },
                },
            )
        return httpx.Response(200, json={"cpu": 42})

    fake_http.handler = upstream
    client = TestClient(app_main.app)
    resp = client.post(
        "/api/v1/query",
        json={
            "config": {"prometheusUrl": "http://prom:9090", "restUrl": "http://api.example.com"},
            "queries": [
                {"refId": "A", "queryType": "prometheus", "timeRange": RANGE, "promQL": "up"},
                {"refId": "B", "queryType": "rest", "timeRange": RANGE, "restEndpoint": "/stats"},
            ],
        },
    )

    assert resp.status_code == 200
    results = resp.json()["results"]
    assert results["A"]["errorKind"] == "ParseError"
    assert "shard" in results["A"]["error"]
    fields = results["B"]["frames"][0]["fields"]
    assert [(f["name"], f["values"]) for f in fields] == [("cpu", [42])]
