"""HTTP-level tests for the FastAPI application."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from fastapi.testclient import TestClient

from subs_gateway.api import create_api
from subs_gateway.front_door import BackendResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from subs_gateway.front_door import FrontDoor, InMemoryAccessLogSink


def test_signed_request_reaches_products_backend(
    front_door: FrontDoor,
    invocables: dict[str, Any],
    sink: InMemoryAccessLogSink,
    sign_headers: Callable[..., dict[str, str]],
) -> None:
    invocables["products"].response = BackendResponse(
        status_code=200,
        headers=(("content-type", "application/json"), ("x-result-count", "1")),
        body=b'{"items": ["oat milk"]}',
    )
    headers = sign_headers("GET", "http://testserver/products")

    with TestClient(create_api(front_door)) as client:
        response = client.get("/products", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"items": ["oat milk"]}
    assert response.headers["x-result-count"] == "1"
    (call,) = invocables["products"].calls
    forwarded, budget = call
    assert forwarded.path == "/products"
    assert forwarded.method == "GET"
    assert budget == 60
    (entry,) = sink.entries
    assert entry.status == 200
    assert entry.domain_name == "testserver"
    assert entry.response_length == len(b'{"items": ["oat milk"]}')


def test_signed_post_with_query_and_body(
    front_door: FrontDoor,
    invocables: dict[str, Any],
    sign_headers: Callable[..., dict[str, str]],
) -> None:
    body = json.dumps({"name": "almond milk"}).encode()
    headers = sign_headers(
        "POST",
        "http://testserver/add-product?source=manual",
        body=body,
        headers={"Content-Type": "application/json"},
    )

    with TestClient(create_api(front_door)) as client:
        response = client.post("/add-product?source=manual", content=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"backend": "add-product"}
    (call,) = invocables["add-product"].calls
    assert call[0].body == body
    assert call[0].query_string == "source=manual"


def test_unsigned_request_is_unauthorized(
    front_door: FrontDoor,
    invocables: dict[str, Any],
    sink: InMemoryAccessLogSink,
) -> None:
    with TestClient(create_api(front_door)) as client:
        response = client.get("/status")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}
    assert invocables["status"].calls == []
    assert [entry.status for entry in sink.entries] == [401]


def test_unknown_path_is_not_found(
    front_door: FrontDoor,
    sign_headers: Callable[..., dict[str, str]],
) -> None:
    headers = sign_headers("GET", "http://testserver/unknown-path")

    with TestClient(create_api(front_door)) as client:
        response = client.get("/unknown-path", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_caller_without_grant_is_forbidden(
    front_door: FrontDoor,
    invocables: dict[str, Any],
    sign_headers: Callable[..., dict[str, str]],
    other_caller: dict[str, str],
) -> None:
    headers = sign_headers("POST", "http://testserver/add-product", **other_caller)

    with TestClient(create_api(front_door)) as client:
        response = client.post("/add-product", headers=headers)

    assert response.status_code == 403
    assert invocables["add-product"].calls == []


def test_cors_preflight_is_answered_for_any_origin(front_door: FrontDoor) -> None:
    with TestClient(create_api(front_door)) as client:
        response = client.options(
            "/products",
            headers={
                "Origin": "https://shop.example.com",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "authorization,x-amz-date",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "GET" in response.headers["access-control-allow-methods"]


def test_cors_headers_are_added_to_proxied_responses(
    front_door: FrontDoor,
    sign_headers: Callable[..., dict[str, str]],
) -> None:
    headers = sign_headers("GET", "http://testserver/substitutions")

    with TestClient(create_api(front_door)) as client:
        response = client.get(
            "/substitutions", headers={**headers, "Origin": "https://shop.example.com"}
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_unlisted_method_is_handled_by_the_front_door(
    front_door: FrontDoor,
    invocables: dict[str, Any],
    sink: InMemoryAccessLogSink,
    sign_headers: Callable[..., dict[str, str]],
) -> None:
    headers = sign_headers("TRACE", "http://testserver/products")

    with TestClient(create_api(front_door)) as client:
        response = client.request("TRACE", "/products", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}
    assert invocables["products"].calls == []
    assert [(entry.http_method, entry.status) for entry in sink.entries] == [("TRACE", 404)]
