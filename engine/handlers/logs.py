from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from config import QUERY_TYPE_LOKI, settings
from datasources.data_config import DataSourceConfig
from datasources.factory import DataSourceFactory
from engine.frames import Frame
from engine.handlers.base import QueryHandler
from engine.normalize import loki
from engine.queries import LogsQuery

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_ns(value: datetime) -> int:
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


class LogsHandler(QueryHandler[LogsQuery]):
    query_type = QUERY_TYPE_LOKI

    def __init__(self, config: DataSourceConfig, timeout: Optional[float] = None, limit: Optional[int] = None):
        super().__init__(config, timeout)
        self.limit = limit if limit is not None else settings.loki_limit

    async def handle(self, query: LogsQuery) -> List[Frame]:
        connector = DataSourceFactory.create_logs(self.config, timeout=self.timeout)
        query.require_payload()

        tr = query.time_range
        data = await connector.query_range(
            query.log_ql,
            start=to_ns(tr.from_),
            end=to_ns(tr.to),
            limit=self.limit,
        )
        return loki.to_frames(data)
