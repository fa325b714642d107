"""Backend units reachable as plain HTTP services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from subs_gateway.front_door.errors import BackendInvocationError
from subs_gateway.front_door.messages import (
    BackendResponse,
    ErrorMessage,
    end_to_end_headers,
)

if TYPE_CHECKING:
    from subs_gateway.front_door.messages import GatewayRequest

SERVER_ERROR_STATUS = 500
# httpx decodes compressed bodies, so the original encoding header no longer applies.
_DROPPED_RESPONSE_HEADERS = frozenset({"content-encoding"})


class HttpInvocable:
    """Forward requests to ``base_url`` joined with the request path."""

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url_for(self, request: GatewayRequest) -> str:
        url = f"{self._base_url}{request.raw_path or request.path}"
        if request.query_string:
            url = f"{url}?{request.query_string}"
        return url

    async def invoke(
        self, request: GatewayRequest, *, budget_seconds: float
    ) -> BackendResponse:
        headers = [
            (name, value)
            for name, value in end_to_end_headers(request.headers)
            if name != "host"
        ]
        try:
            async with httpx.AsyncClient(
                timeout=budget_seconds, transport=self._transport
            ) as client:
                response = await client.request(
                    request.method,
                    self._url_for(request),
                    headers=headers,
                    content=request.body,
                )
        except httpx.TimeoutException as exc:
            msg = f"{self._base_url} did not answer within {budget_seconds:g}s"
            raise TimeoutError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Forwarding to {self._base_url} failed: {exc}"
            raise BackendInvocationError(
                msg,
                headers=(("content-type", "application/json"),),
                body=ErrorMessage(message="Bad Gateway").model_dump_json().encode(),
            ) from exc

        response_headers = tuple(
            (name, value)
            for name, value in end_to_end_headers(tuple(response.headers.multi_items()))
            if name not in _DROPPED_RESPONSE_HEADERS
        )
        if response.status_code >= SERVER_ERROR_STATUS:
            msg = f"{self._base_url} answered {response.status_code}"
            raise BackendInvocationError(
                msg,
                status_code=response.status_code,
                headers=response_headers,
                body=response.content,
            )
        return BackendResponse(
            status_code=response.status_code,
            headers=response_headers,
            body=response.content,
        )


__all__ = ["HttpInvocable"]
