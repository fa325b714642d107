"""Backend units deployed as AWS Lambda functions.

Requests are delivered with the HTTP API payload format 2.0 event and the
function's reply is interpreted with the same format's response rules.
"""

from __future__ import annotations

import asyncio
import base64
import json
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ReadTimeoutError

from subs_gateway.front_door.access_log import REQUEST_TIME_FORMAT
from subs_gateway.front_door.errors import BackendInvocationError
from subs_gateway.front_door.messages import BackendResponse, ErrorMessage

if TYPE_CHECKING:
    from subs_gateway.front_door.messages import GatewayRequest

PAYLOAD_FORMAT_VERSION = "2.0"
READ_TIMEOUT_MARGIN_SECONDS = 5.0
_JSON_HEADERS = (("content-type", "application/json"),)


def _internal_error(message: str) -> BackendInvocationError:
    return BackendInvocationError(
        message,
        headers=_JSON_HEADERS,
        body=ErrorMessage(message="Internal Server Error").model_dump_json().encode(),
    )


def build_event(request: GatewayRequest) -> dict[str, Any]:
    """Return the payload format 2.0 event describing *request*."""
    route_key = f"{request.method} {request.path}"
    headers: dict[str, str] = {}
    cookies: list[str] = []
    for name, value in request.headers:
        if name == "cookie":
            cookies.extend(part.strip() for part in value.split(";") if part.strip())
            continue
        headers[name] = f"{headers[name]},{value}" if name in headers else value

    query: dict[str, str] = {}
    for key, value in parse_qsl(request.query_string, keep_blank_values=True):
        query[key] = f"{query[key]},{value}" if key in query else value

    domain_name = request.domain_name
    event: dict[str, Any] = {
        "version": PAYLOAD_FORMAT_VERSION,
        "routeKey": route_key,
        "rawPath": request.raw_path or request.path,
        "rawQueryString": request.query_string,
        "headers": headers,
        "requestContext": {
            "domainName": domain_name,
            "domainPrefix": domain_name.split(".", 1)[0],
            "http": {
                "method": request.method,
                "path": request.path,
                "protocol": request.protocol,
                "sourceIp": request.source_ip,
                "userAgent": request.user_agent,
            },
            "requestId": request.request_id,
            "routeKey": route_key,
            "stage": "$default",
            "time": request.received_at.strftime(REQUEST_TIME_FORMAT),
            "timeEpoch": int(request.received_at.timestamp() * 1000),
        },
        "isBase64Encoded": False,
    }
    if cookies:
        event["cookies"] = cookies
    if query:
        event["queryStringParameters"] = query
    if request.body:
        try:
            event["body"] = request.body.decode("utf-8")
        except UnicodeDecodeError:
            event["body"] = base64.b64encode(request.body).decode("ascii")
            event["isBase64Encoded"] = True
    return event


def parse_response(payload: bytes) -> BackendResponse:
    """Interpret a function result according to payload format 2.0."""
    try:
        result = json.loads(payload) if payload else None
    except ValueError as exc:
        raise _internal_error("Lambda returned a non-JSON payload") from exc

    if not isinstance(result, dict) or "statusCode" not in result:
        return BackendResponse(status_code=200, headers=_JSON_HEADERS, body=payload)

    headers = [
        (str(name).lower(), str(value))
        for name, value in (result.get("headers") or {}).items()
    ]
    headers.extend(("set-cookie", str(cookie)) for cookie in result.get("cookies") or ())
    body = result.get("body") or ""
    if not isinstance(body, str):
        body = json.dumps(body)
    try:
        content = (
            base64.b64decode(body) if result.get("isBase64Encoded") else body.encode()
        )
        status_code = int(result["statusCode"])
    except (TypeError, ValueError) as exc:
        raise _internal_error("Lambda returned a malformed response") from exc
    return BackendResponse(status_code=status_code, headers=tuple(headers), body=content)


class LambdaInvocable:
    """Invoke a Lambda function synchronously for each request."""

    def __init__(
        self,
        function_name: str,
        *,
        region: str | None = None,
        read_timeout_seconds: float = 60.0,
        client: Any | None = None,
    ) -> None:
        self._function_name = function_name
        self._region = region
        self._read_timeout = read_timeout_seconds + READ_TIMEOUT_MARGIN_SECONDS
        self._client = client

    @property
    def function_name(self) -> str:
        return self._function_name

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "lambda",
                region_name=self._region,
                config=Config(
                    read_timeout=self._read_timeout,
                    retries={"total_max_attempts": 1},
                ),
            )
        return self._client

    async def invoke(
        self, request: GatewayRequest, *, budget_seconds: float
    ) -> BackendResponse:
        client = self._get_client()
        event = json.dumps(build_event(request)).encode("utf-8")
        try:
            result = await asyncio.to_thread(
                client.invoke,
                FunctionName=self._function_name,
                InvocationType="RequestResponse",
                Payload=event,
            )
        except ReadTimeoutError as exc:
            msg = f"{self._function_name} did not answer within {budget_seconds:g}s"
            raise TimeoutError(msg) from exc
        except (BotoCoreError, ClientError) as exc:
            msg = f"Invoking {self._function_name} failed: {exc}"
            raise _internal_error(msg) from exc

        payload = result["Payload"].read()
        if result.get("FunctionError"):
            msg = f"{self._function_name} reported {result['FunctionError']}"
            raise BackendInvocationError(msg, headers=_JSON_HEADERS, body=payload)
        return parse_response(payload)


__all__ = ["LambdaInvocable", "build_event", "parse_response"]
