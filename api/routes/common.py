"""
Shared utilities and dependencies for API route modules.

Provides a centralized place for resolving the data source instance a request
targets and for tying upstream work to the lifetime of the client connection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Optional

from fastapi import Request

from api.requests import InstanceRequest
from datasources.data_config import DataSourceConfig, DataSourceSettings

_default_config: Optional[DataSourceConfig] = None

DISCONNECT_POLL_SECONDS = 0.5


def get_default_config() -> DataSourceConfig:
    global _default_config
    if _default_config is None:
        _default_config = DataSourceSettings().to_config()
    return _default_config


def reset_default_config() -> None:
    global _default_config
    _default_config = None


def resolve_config(req: Optional[InstanceRequest]) -> DataSourceConfig:
    if req is not None:
        if req.config is not None:
            return req.config
        if req.json_data is not None or req.secure_json_data is not None:
            return DataSourceConfig.from_instance_settings(req.json_data, req.secure_json_data)
    return get_default_config()


@contextlib.asynccontextmanager
async def cancel_on_disconnect(request: Optional[Request]) -> AsyncIterator[asyncio.Event]:
    """Yield an event that is set once the client goes away."""
    event = asyncio.Event()
    if request is None:
        yield event
        return

    async def _watch() -> None:
        while not event.is_set():
            if await request.is_disconnected():
                event.set()
                return
            await asyncio.sleep(DISCONNECT_POLL_SECONDS)

    watcher = asyncio.create_task(_watch())
    try:
        yield event
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
