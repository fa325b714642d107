"""Provisioning of the front door from settings.

The four routes, their budgets and the environment handed to each backend
are fixed here and assembled once when the application starts.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from subs_gateway.backends import build_invocable
from subs_gateway.database import DatabaseAccessLogSink, DatabaseService
from subs_gateway.front_door import (
    AccessLogger,
    AccessLogSink,
    AuthorizationPolicy,
    BackendReference,
    CredentialStore,
    FrontDoor,
    Invocable,
    LoggerAccessLogSink,
    Route,
    RoutingTable,
    SigV4Authenticator,
)
from subs_gateway.settings import GatewaySettings, get_settings
from subs_gateway.shared import HttpMethod, RouteKey

SHORT_BUDGET_SECONDS = 60.0
STATUS_BUDGET_SECONDS = 900.0


@dataclass(slots=True, frozen=True)
class RouteDefinition:
    """Static description of one route before its backend is resolved."""

    backend: str
    method: HttpMethod
    path: str
    budget_seconds: float

    @property
    def key(self) -> RouteKey:
        return RouteKey(method=self.method, path=self.path)


ROUTE_DEFINITIONS: tuple[RouteDefinition, ...] = (
    RouteDefinition("products", HttpMethod.GET, "/products", SHORT_BUDGET_SECONDS),
    RouteDefinition(
        "substitutions", HttpMethod.GET, "/substitutions", SHORT_BUDGET_SECONDS
    ),
    RouteDefinition("add-product", HttpMethod.POST, "/add-product", SHORT_BUDGET_SECONDS),
    RouteDefinition("status", HttpMethod.GET, "/status", STATUS_BUDGET_SECONDS),
)


def backend_targets(settings: GatewaySettings) -> dict[str, str]:
    """Return the configured target of every backend unit."""
    return {
        "products": settings.products_backend,
        "substitutions": settings.substitutions_backend,
        "add-product": settings.add_product_backend,
        "status": settings.status_backend,
    }


def backend_environments(settings: GatewaySettings) -> dict[str, dict[str, str]]:
    """Return the environment bundle injected into every backend unit."""
    return {
        "products": {"region": settings.region, "host": settings.search_host},
        "substitutions": {"region": settings.region, "host": settings.search_host},
        "add-product": {"tableName": settings.products_table_name},
        "status": {
            "host": settings.search_host,
            "tableName": settings.count_table_name,
            "region": settings.region,
        },
    }


def build_routing_table(
    settings: GatewaySettings,
    *,
    invocables: Mapping[str, Invocable] | None = None,
) -> RoutingTable:
    """Build the routing table, resolving backends from *invocables* or settings."""
    targets = backend_targets(settings)
    environments = backend_environments(settings)
    overrides = invocables or {}
    routes = []
    for definition in ROUTE_DEFINITIONS:
        target = targets[definition.backend]
        invocable = overrides.get(definition.backend) or build_invocable(
            target, budget_seconds=definition.budget_seconds, region=settings.region
        )
        routes.append(
            Route(
                key=definition.key,
                backend=BackendReference(
                    name=definition.backend,
                    target=target,
                    invocable=invocable,
                    budget_seconds=definition.budget_seconds,
                    environment=environments[definition.backend],
                ),
            )
        )
    return RoutingTable(routes)


def build_access_log_sink(settings: GatewaySettings) -> AccessLogSink:
    if settings.access_log_sink == "database":
        return DatabaseAccessLogSink(DatabaseService(settings=settings))
    return LoggerAccessLogSink()


def provision_front_door(
    settings: GatewaySettings | None = None,
    *,
    invocables: Mapping[str, Invocable] | None = None,
    sink: AccessLogSink | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FrontDoor:
    """Assemble the front door: routes, uniform grants, authenticator and logger."""
    config = settings or get_settings()
    routing_table = build_routing_table(config, invocables=invocables)
    policy = AuthorizationPolicy.uniform(
        (route.key for route in routing_table), (config.access_role_arn,)
    )
    authenticator = SigV4Authenticator(
        CredentialStore(config.caller_credentials),
        region=config.region,
        service=config.signing_service,
        max_skew_seconds=config.signature_max_skew_seconds,
        clock=clock,
    )
    access_logger = AccessLogger(
        sink or build_access_log_sink(config),
        max_queue_size=config.access_log_queue_size,
    )
    return FrontDoor(
        routing_table=routing_table,
        policy=policy,
        authenticator=authenticator,
        access_logger=access_logger,
    )


def describe_front_door(front_door: FrontDoor) -> list[dict[str, Any]]:
    """Return a JSON-friendly description of every route and its grants."""
    return [
        {
            "method": str(route.method),
            "path": route.path,
            "backend": route.backend.describe(),
            "principals": sorted(front_door.policy.principals_for(route.key)),
        }
        for route in front_door.routing_table
    ]


__all__ = [
    "ROUTE_DEFINITIONS",
    "RouteDefinition",
    "backend_environments",
    "backend_targets",
    "build_access_log_sink",
    "build_routing_table",
    "describe_front_door",
    "provision_front_door",
]
