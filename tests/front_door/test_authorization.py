"""Tests for per-route invoke grants."""

from __future__ import annotations

import pytest

from subs_gateway.front_door import AuthorizationPolicy, Grant, UnauthorizedError
from subs_gateway.shared import CallerIdentity, HttpMethod, RouteKey

PRODUCTS = RouteKey(method=HttpMethod.GET, path="/products")
ADD_PRODUCT = RouteKey(method=HttpMethod.POST, path="/add-product")
ROLE = "arn:aws:iam::123456789012:role/subs-access-role"
OTHER = "arn:aws:iam::123456789012:role/reporting-role"


def identity(principal: str) -> CallerIdentity:
    return CallerIdentity(principal=principal, access_key_id="AKID")


def test_uniform_policy_grants_every_route_to_every_principal() -> None:
    policy = AuthorizationPolicy.uniform([PRODUCTS, ADD_PRODUCT], [ROLE])

    assert policy.principals_for(PRODUCTS) == frozenset({ROLE})
    assert policy.principals_for(ADD_PRODUCT) == frozenset({ROLE})
    assert policy.routes == frozenset({PRODUCTS, ADD_PRODUCT})


def test_authorize_accepts_granted_principal() -> None:
    policy = AuthorizationPolicy([Grant(route=PRODUCTS, principal=ROLE)])

    policy.authorize(PRODUCTS, identity(ROLE))


def test_authorize_rejects_principal_without_grant_for_route() -> None:
    policy = AuthorizationPolicy(
        [Grant(route=PRODUCTS, principal=ROLE), Grant(route=PRODUCTS, principal=OTHER)]
    )

    with pytest.raises(UnauthorizedError) as excinfo:
        policy.authorize(ADD_PRODUCT, identity(OTHER))

    assert excinfo.value.status_code == 403
    assert excinfo.value.route == ADD_PRODUCT
    assert excinfo.value.principal == OTHER


def test_grants_are_independent_of_construction_order() -> None:
    grants = [
        Grant(route=ADD_PRODUCT, principal=OTHER),
        Grant(route=PRODUCTS, principal=ROLE),
        Grant(route=ADD_PRODUCT, principal=ROLE),
    ]

    forward = AuthorizationPolicy(grants)
    backward = AuthorizationPolicy(reversed(grants))

    for route in (PRODUCTS, ADD_PRODUCT):
        assert forward.principals_for(route) == backward.principals_for(route)


def test_route_without_grants_permits_nobody() -> None:
    policy = AuthorizationPolicy([])

    assert not policy.is_permitted(PRODUCTS, ROLE)
    assert policy.principals_for(PRODUCTS) == frozenset()
