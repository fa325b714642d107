"""Service layer wiring the front door for the API application."""

from subs_gateway.api.services.provisioning import (
    ROUTE_DEFINITIONS,
    RouteDefinition,
    backend_environments,
    backend_targets,
    build_access_log_sink,
    build_routing_table,
    describe_front_door,
    provision_front_door,
)

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
