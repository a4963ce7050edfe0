"""
Health routes: process liveness and data source connectivity.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter

from api.requests import HealthCheckRequest
from api.responses import HealthCheckResponse
from api.routes.common import resolve_config
from api.routes.exception import handle_exceptions
from engine.health import check_health

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok"}


@router.post("/health/check", response_model=HealthCheckResponse, response_model_exclude_none=True)
@handle_exceptions
async def health_check(req: Optional[HealthCheckRequest] = None) -> HealthCheckResponse:
    result = await check_health(resolve_config(req))
    return HealthCheckResponse.from_result(result)
