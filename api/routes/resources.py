from fastapi import APIRouter, Request, Response

from api.routes.common import get_default_config
from engine.proxy import forward

router = APIRouter(tags=["Resources"])


@router.api_route("/resources/{backend}/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def call_resource(backend: str, path: str, request: Request) -> Response:
    body = await request.body()
    proxied = await forward(
        get_default_config(),
        backend,
        path,
        request.method,
        headers=request.headers.items(),
        body=body,
        query_string=request.url.query,
    )
    resp = Response(content=proxied.body, status_code=proxied.status)
    for name, value in proxied.headers:
        resp.headers.append(name, value)
    return resp
