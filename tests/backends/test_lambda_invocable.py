"""Tests for the Lambda backend adapter."""

from __future__ import annotations

import asyncio
import base64
import io
import json
from datetime import UTC, datetime
from typing import Any

import pytest
from botocore.exceptions import ClientError, ReadTimeoutError

from subs_gateway.backends import LambdaInvocable
from subs_gateway.backends.lambda_invocable import build_event, parse_response
from subs_gateway.front_door import BackendInvocationError, GatewayRequest


class FakeLambdaClient:
    """Stand-in for a boto3 Lambda client returning canned results."""

    def __init__(
        self, result: dict[str, Any] | None = None, error: Exception | None = None
    ) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def invoke(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def lambda_result(payload: Any, *, function_error: str | None = None) -> dict[str, Any]:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    result: dict[str, Any] = {"StatusCode": 200, "Payload": io.BytesIO(raw)}
    if function_error:
        result["FunctionError"] = function_error
    return result


def make_request(**overrides: Any) -> GatewayRequest:
    values: dict[str, Any] = {
        "method": "GET",
        "path": "/substitutions",
        "raw_path": "/substitutions",
        "query_string": "product=oat%20milk&tag=vegan&tag=dairy-free",
        "headers": (
            ("host", "abc123.execute-api.us-east-1.amazonaws.com"),
            ("user-agent", "curl/8.0"),
            ("accept", "application/json"),
            ("accept", "text/plain"),
            ("cookie", "session=1; theme=dark"),
        ),
        "source_ip": "198.51.100.4",
        "request_id": "req-42",
        "received_at": datetime(2026, 10, 18, 9, 30, 5, tzinfo=UTC),
    }
    values.update(overrides)
    return GatewayRequest(**values)


def test_event_follows_payload_format_two() -> None:
    event = build_event(make_request())

    assert event["version"] == "2.0"
    assert event["routeKey"] == "GET /substitutions"
    assert event["rawPath"] == "/substitutions"
    assert event["rawQueryString"] == "product=oat%20milk&tag=vegan&tag=dairy-free"
    assert event["queryStringParameters"] == {"product": "oat milk", "tag": "vegan,dairy-free"}
    assert event["headers"]["accept"] == "application/json,text/plain"
    assert "cookie" not in event["headers"]
    assert event["cookies"] == ["session=1", "theme=dark"]
    context = event["requestContext"]
    assert context["domainPrefix"] == "abc123"
    assert context["http"]["sourceIp"] == "198.51.100.4"
    assert context["http"]["userAgent"] == "curl/8.0"
    assert context["requestId"] == "req-42"
    assert context["time"] == "18/Oct/2026:09:30:05 +0000"
    assert "body" not in event


def test_binary_body_is_base64_encoded() -> None:
    event = build_event(make_request(method="POST", body=b"\xff\x00\x10"))

    assert event["isBase64Encoded"] is True
    assert base64.b64decode(event["body"]) == b"\xff\x00\x10"


def test_text_body_is_passed_as_is() -> None:
    event = build_event(make_request(method="POST", body=b'{"name": "oat milk"}'))

    assert event["isBase64Encoded"] is False
    assert event["body"] == '{"name": "oat milk"}'


def test_structured_response_is_unpacked() -> None:
    response = parse_response(
        json.dumps(
            {
                "statusCode": 201,
                "headers": {"Content-Type": "text/plain"},
                "cookies": ["session=2"],
                "body": "created",
            }
        ).encode()
    )

    assert response.status_code == 201
    assert response.headers == (("content-type", "text/plain"), ("set-cookie", "session=2"))
    assert response.body == b"created"


def test_base64_response_body_is_decoded() -> None:
    response = parse_response(
        json.dumps(
            {
                "statusCode": 200,
                "isBase64Encoded": True,
                "body": base64.b64encode(b"\x01\x02").decode(),
            }
        ).encode()
    )

    assert response.body == b"\x01\x02"


def test_bare_json_result_becomes_ok_response() -> None:
    payload = json.dumps({"items": ["oat milk"]}).encode()

    response = parse_response(payload)

    assert response.status_code == 200
    assert response.body == payload
    assert ("content-type", "application/json") in response.headers


def test_non_json_result_is_a_backend_failure() -> None:
    with pytest.raises(BackendInvocationError) as excinfo:
        parse_response(b"not json")

    assert excinfo.value.status_code == 502


def test_invoke_calls_function_synchronously_once() -> None:
    client = FakeLambdaClient(lambda_result({"statusCode": 200, "body": "ok"}))
    invocable = LambdaInvocable("SubsApiLambda", client=client)

    response = asyncio.run(invocable.invoke(make_request(), budget_seconds=60))

    assert response.body == b"ok"
    (call,) = client.calls
    assert call["FunctionName"] == "SubsApiLambda"
    assert call["InvocationType"] == "RequestResponse"
    assert json.loads(call["Payload"])["routeKey"] == "GET /substitutions"


def test_function_error_is_relayed() -> None:
    error_payload = {"errorMessage": "boom", "errorType": "RuntimeError"}
    client = FakeLambdaClient(lambda_result(error_payload, function_error="Unhandled"))
    invocable = LambdaInvocable("StatusLambda", client=client)

    with pytest.raises(BackendInvocationError) as excinfo:
        asyncio.run(invocable.invoke(make_request(), budget_seconds=900))

    assert excinfo.value.status_code == 502
    assert json.loads(excinfo.value.body) == error_payload
    assert len(client.calls) == 1


def test_read_timeout_becomes_timeout_error() -> None:
    client = FakeLambdaClient(error=ReadTimeoutError(endpoint_url="https://lambda"))
    invocable = LambdaInvocable("StatusLambda", client=client)

    with pytest.raises(TimeoutError):
        asyncio.run(invocable.invoke(make_request(), budget_seconds=900))


def test_client_error_is_a_backend_failure() -> None:
    client = FakeLambdaClient(
        error=ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "missing"}},
            "Invoke",
        )
    )
    invocable = LambdaInvocable("ProductsApiLambda", client=client)

    with pytest.raises(BackendInvocationError) as excinfo:
        asyncio.run(invocable.invoke(make_request(), budget_seconds=60))

    assert json.loads(excinfo.value.body) == {"message": "Internal Server Error"}
