from __future__ import annotations

from typing import List

from config import QUERY_TYPE_REST
from datasources.factory import DataSourceFactory
from engine.frames import Frame
from engine.handlers.base import QueryHandler
from engine.normalize.rest import RestNormalizer
from engine.queries import RestQuery


class RestHandler(QueryHandler[RestQuery]):
    query_type = QUERY_TYPE_REST

    async def handle(self, query: RestQuery) -> List[Frame]:
        query.require_payload()
        connector = DataSourceFactory.create_rest(self.config, timeout=self.timeout)

        payload = await connector.request(
            query.rest_endpoint,
            method=query.rest_method,
            headers=query.rest_headers,
            body=query.rest_body,
        )
        normalizer = RestNormalizer(start=query.time_range.from_, step=query.interval)
        return normalizer.to_frames(payload)
