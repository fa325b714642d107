"""Test configuration and fixtures for the gateway test suite."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import pytest
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from subs_gateway.api.services import provision_front_door
from subs_gateway.front_door import (
    BackendResponse,
    FrontDoor,
    GatewayRequest,
    InMemoryAccessLogSink,
)
from subs_gateway.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

REGION = "us-east-1"
ACCESS_ROLE_ARN = "arn:aws:iam::123456789012:role/subs-access-role"
OTHER_ROLE_ARN = "arn:aws:iam::123456789012:role/reporting-role"
ACCESS_KEY_ID = "AKIDACCESSROLE"
SECRET_ACCESS_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
OTHER_KEY_ID = "AKIDREPORTING"
OTHER_SECRET_ACCESS_KEY = "je7MtGbClwBF/2Zp9Utk/h3yCo8nvbEXAMPLEKEY"
HOST = "testserver"


class RecordingInvocable:
    """In-process backend that records every invocation it receives."""

    def __init__(
        self,
        response: BackendResponse | None = None,
        *,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.response = response or BackendResponse()
        self.delay = delay
        self.error = error
        self.calls: list[tuple[GatewayRequest, float]] = []

    async def invoke(
        self, request: GatewayRequest, *, budget_seconds: float
    ) -> BackendResponse:
        self.calls.append((request, budget_seconds))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def sign(
    method: str,
    url: str,
    *,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    access_key_id: str = ACCESS_KEY_ID,
    secret_access_key: str = SECRET_ACCESS_KEY,
    region: str = REGION,
    service: str = "execute-api",
) -> dict[str, str]:
    """Return *headers* plus the SigV4 headers an AWS SDK would send."""
    request = AWSRequest(method=method, url=url, data=body, headers=dict(headers or {}))
    credentials = Credentials(access_key_id, secret_access_key)
    SigV4Auth(credentials, service, region).add_auth(request)
    return dict(request.headers.items())


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("ACCESS_ROLE_ARN", ACCESS_ROLE_ARN)
    monkeypatch.setenv("REGION", REGION)
    monkeypatch.setenv(
        "CALLER_CREDENTIALS",
        json.dumps(
            {
                ACCESS_KEY_ID: {
                    "secret_access_key": SECRET_ACCESS_KEY,
                    "principal": ACCESS_ROLE_ARN,
                },
                OTHER_KEY_ID: {
                    "secret_access_key": OTHER_SECRET_ACCESS_KEY,
                    "principal": OTHER_ROLE_ARN,
                },
            }
        ),
    )
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def invocables() -> dict[str, RecordingInvocable]:
    """One recording backend per route, each answering with its own name."""
    return {
        name: RecordingInvocable(
            BackendResponse(
                status_code=200,
                headers=(("content-type", "application/json"),),
                body=json.dumps({"backend": name}).encode(),
            )
        )
        for name in ("products", "substitutions", "add-product", "status")
    }


@pytest.fixture
def sink() -> InMemoryAccessLogSink:
    return InMemoryAccessLogSink()


@pytest.fixture
def front_door(
    invocables: dict[str, RecordingInvocable], sink: InMemoryAccessLogSink
) -> FrontDoor:
    return provision_front_door(get_settings(), invocables=invocables, sink=sink)


@pytest.fixture
def signed_request() -> Callable[..., GatewayRequest]:
    """Build a :class:`GatewayRequest` carrying a valid SigV4 signature."""

    def build(
        method: str,
        path: str,
        *,
        query: str = "",
        body: bytes = b"",
        headers: dict[str, str] | None = None,
        **sign_options: str,
    ) -> GatewayRequest:
        url = f"http://{HOST}{path}" + (f"?{query}" if query else "")
        signed = sign(method, url, body=body, headers=headers, **sign_options)
        header_pairs = [("host", HOST), ("user-agent", "aws-sdk-test/1.0")]
        header_pairs.extend((name.lower(), value) for name, value in signed.items())
        return GatewayRequest(
            method=method,
            path=path,
            raw_path=path,
            query_string=query,
            headers=tuple(header_pairs),
            body=body,
            source_ip="203.0.113.7",
        )

    return build


@pytest.fixture
def sign_headers() -> Callable[..., dict[str, str]]:
    return sign


@pytest.fixture
def make_invocable() -> type[RecordingInvocable]:
    return RecordingInvocable


@pytest.fixture
def other_caller() -> dict[str, str]:
    """Signing options of a known caller that holds no grants."""
    return {
        "access_key_id": OTHER_KEY_ID,
        "secret_access_key": OTHER_SECRET_ACCESS_KEY,
    }
