# connectors/prometheus.py

from typing import Any, Dict, Optional

from config import PROMETHEUS_QUERY_PATH, PROMETHEUS_QUERY_RANGE_PATH, settings
from datasources.base import MetricsConnector
from datasources.data_config import DataSourceConfig
from datasources.helpers import check_envelope, fetch_json, probe


def format_epoch(ts: float) -> str:
    return str(int(ts)) if float(ts).is_integer() else repr(float(ts))


class PrometheusConnector(MetricsConnector):
    label = "Prometheus"

    def __init__(
        self,
        config: DataSourceConfig,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(config, config.prometheus_url, timeout, headers)
        self.health_path = settings.metrics_health_path

    async def query_range(
        self,
        query: str,
        start: float,
        end: float,
        step: str,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{PROMETHEUS_QUERY_RANGE_PATH}"
        params: Dict[str, Any] = {
            "query": query,
            "start": format_epoch(start),
            "end": format_epoch(end),
            "step": step,
        }
        payload = await fetch_json(url, params=params, headers=self._headers(), timeout=self.timeout, label=self.label)
        return check_envelope(payload, self.label)

    async def query_instant(self, query: str, time: float) -> Dict[str, Any]:
        url = f"{self.base_url}{PROMETHEUS_QUERY_PATH}"
        params: Dict[str, Any] = {"query": query, "time": format_epoch(time)}
        payload = await fetch_json(url, params=params, headers=self._headers(), timeout=self.timeout, label=self.label)
        return check_envelope(payload, self.label)

    async def check_health(self, timeout: Optional[float] = None) -> int:
        return await probe(
            self.health_url,
            headers=self._headers(),
            timeout=timeout if timeout is not None else settings.health_timeout,
            label=self.label,
        )
