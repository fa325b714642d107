"""Catch-all endpoint handing every request to the front door."""

from __future__ import annotations

from fastapi import Request, Response
from starlette.routing import Route

from subs_gateway.api.dependencies import get_front_door
from subs_gateway.front_door import GatewayRequest, GatewayResponse
from subs_gateway.front_door.messages import end_to_end_headers


async def to_gateway_request(request: Request) -> GatewayRequest:
    """Capture the ASGI request exactly as received."""
    scope = request.scope
    raw_path: bytes = scope.get("raw_path") or b""
    client = request.client
    return GatewayRequest(
        method=request.method,
        path=request.url.path,
        raw_path=raw_path.split(b"?", 1)[0].decode("latin-1"),
        query_string=scope.get("query_string", b"").decode("latin-1"),
        headers=tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in scope["headers"]
        ),
        body=await request.body(),
        source_ip=client.host if client else "",
        protocol=f"HTTP/{scope.get('http_version', '1.1')}",
    )


def to_response(gateway_response: GatewayResponse) -> Response:
    response = Response(
        content=gateway_response.body, status_code=gateway_response.status_code
    )
    for name, value in end_to_end_headers(gateway_response.headers):
        response.headers.append(name, value)
    return response


async def forward(request: Request) -> Response:
    """Run the request through the front door and relay its response."""

    front_door = get_front_door(request)
    gateway_response = await front_door.handle(await to_gateway_request(request))
    return to_response(gateway_response)


# methods=None: every verb reaches the front door, unknown ones included.
proxy_route = Route("/{path:path}", forward, methods=None, include_in_schema=False)
