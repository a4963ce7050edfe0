from typing import Any, Dict, Optional

from config import LOKI_QUERY_RANGE_PATH
from datasources.base import LogsConnector
from datasources.data_config import DataSourceConfig
from datasources.helpers import check_envelope, fetch_json


class LokiConnector(LogsConnector):
    label = "Loki"

    def __init__(
        self,
        config: DataSourceConfig,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(config, config.loki_url, timeout, headers)

    async def query_range(
        self,
        query: str,
        start: int,
        end: int,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{LOKI_QUERY_RANGE_PATH}"
        params: Dict[str, Any] = {"query": query, "start": str(start), "end": str(end)}
        if limit is not None:
            params["limit"] = str(limit)

        payload = await fetch_json(url, params=params, headers=self._headers(), timeout=self.timeout, label=self.label)
        return check_envelope(payload, self.label)
