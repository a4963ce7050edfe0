from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from config import QUERY_TYPE_PROMETHEUS, settings
from datasources.factory import DataSourceFactory
from engine.frames import Frame
from engine.handlers.base import QueryHandler
from engine.normalize import prometheus
from engine.queries import MetricsQuery


def step_param(interval: Optional[timedelta]) -> str:
    seconds = int(interval.total_seconds()) if interval else 0
    if seconds <= 0:
        seconds = settings.default_step_seconds
    return f"{seconds}s"


class MetricsHandler(QueryHandler[MetricsQuery]):
    query_type = QUERY_TYPE_PROMETHEUS

    async def handle(self, query: MetricsQuery) -> List[Frame]:
        connector = DataSourceFactory.create_metrics(self.config, timeout=self.timeout)
        query.require_payload()

        tr = query.time_range
        if tr.is_instant:
            data = await connector.query_instant(query.prom_ql, tr.to.timestamp())
        else:
            data = await connector.query_range(
                query.prom_ql,
                start=tr.from_.timestamp(),
                end=tr.to.timestamp(),
                step=step_param(query.interval),
            )
        return prometheus.to_frames(data, is_range=not tr.is_instant)
