"""
Query router: dispatches each query of a batch to its protocol handler by
type tag and collects one result per query identifier.

Failures are isolated per query; only a batch whose queries cannot be told
apart by ``refId`` is rejected as a whole.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import settings
from datasources.data_config import DataSourceConfig
from datasources.exceptions import DataSourceError, InvalidBatch, QueryCancelled
from engine.frames import Frame
from engine.handlers import HANDLERS
from engine.queries import parse_query

log = logging.getLogger(__name__)


@dataclass
class DataResponse:
    frames: List[Frame] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def from_error(cls, exc: BaseException) -> "DataResponse":
        if isinstance(exc, DataSourceError):
            return cls(error=exc.describe(), error_kind=exc.kind)
        return cls(error=f"QueryError: {exc}", error_kind="QueryError")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error, "errorKind": self.error_kind}
        return {"frames": [f.to_dict() for f in self.frames]}


QueryResult = Dict[str, DataResponse]


def validate_batch(raw_queries: Any) -> List[Tuple[str, Any]]:
    if not isinstance(raw_queries, Sequence) or isinstance(raw_queries, (str, bytes)):
        raise InvalidBatch("queries must be a list")

    batch: List[Tuple[str, Any]] = []
    seen: set[str] = set()
    for idx, raw in enumerate(raw_queries):
        ref_id = raw.get("refId") if isinstance(raw, dict) else None
        if not isinstance(ref_id, str) or not ref_id:
            raise InvalidBatch(f"query at position {idx} has no refId")
        if ref_id in seen:
            raise InvalidBatch(f"duplicate refId {ref_id!r}")
        seen.add(ref_id)
        batch.append((ref_id, raw))
    return batch


class QueryRouter:
    def __init__(
        self,
        config: DataSourceConfig,
        max_parallel: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.config = config
        self.max_parallel = max(1, int(max_parallel or settings.max_parallel_queries))
        self.timeout = timeout

    async def execute(self, ref_id: str, raw: Any) -> List[Frame]:
        query = parse_query(raw, ref_id)
        log.debug("handling query refId=%s type=%s", ref_id, query.query_type)
        handler = HANDLERS[query.query_type](self.config, timeout=self.timeout)
        return await handler.handle(query)

    async def query_data(
        self,
        raw_queries: Any,
        cancel: Optional[asyncio.Event] = None,
    ) -> QueryResult:
        batch = validate_batch(raw_queries)
        sem = asyncio.Semaphore(self.max_parallel)

        async def _run(ref_id: str, raw: Any) -> List[Frame]:
            async with sem:
                return await self.execute(ref_id, raw)

        tasks = [asyncio.create_task(_run(ref_id, raw)) for ref_id, raw in batch]
        watcher = asyncio.create_task(_cancel_on(cancel, tasks)) if cancel is not None else None
        try:
            raw_results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            if watcher is not None:
                watcher.cancel()

        results: QueryResult = {}
        for (ref_id, _), r in zip(batch, raw_results):
            if isinstance(r, asyncio.CancelledError):
                r = QueryCancelled("query cancelled by caller")
            if isinstance(r, BaseException):
                if isinstance(r, DataSourceError):
                    log.warning("query refId=%s failed: %s", ref_id, r.describe())
                else:
                    log.error("query refId=%s failed unexpectedly", ref_id, exc_info=r)
                results[ref_id] = DataResponse.from_error(r)
            else:
                results[ref_id] = DataResponse(frames=r)
        return results


async def _cancel_on(cancel: asyncio.Event, tasks: List[asyncio.Task]) -> None:
    await cancel.wait()
    pending = [t for t in tasks if not t.done()]
    if pending:
        log.info("cancelling %d in-flight queries", len(pending))
    for task in pending:
        task.cancel()
