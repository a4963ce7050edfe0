from fastapi import APIRouter, Request

from api.requests import QueryDataRequest
from api.responses import QueryDataResponse
from api.routes.common import cancel_on_disconnect, resolve_config
from api.routes.exception import handle_exceptions
from engine.router import QueryRouter

router = APIRouter(tags=["Query"])


@router.post("/query", response_model=QueryDataResponse, response_model_exclude_none=True)
@handle_exceptions
async def query_data(req: QueryDataRequest, request: Request) -> QueryDataResponse:
    config = resolve_config(req)
    async with cancel_on_disconnect(request) as cancelled:
        result = await QueryRouter(config).query_data(req.queries, cancel=cancelled)
    return QueryDataResponse.from_result(result)
