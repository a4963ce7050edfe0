"""
Protocol handler contract shared by the metrics, logs and REST handlers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from datasources.data_config import DataSourceConfig
from engine.frames import Frame
from engine.queries import BaseQuery

Q = TypeVar("Q", bound=BaseQuery)


class QueryHandler(ABC, Generic[Q]):
    """Built per query; holds only the instance config and a timeout."""

    query_type: str = ""

    def __init__(self, config: DataSourceConfig, timeout: Optional[float] = None):
        self.config = config
        self.timeout = timeout

    @abstractmethod
    async def handle(self, query: Q) -> List[Frame]: ...
