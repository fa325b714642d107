"""Shared enums, value objects and cross-cutting helpers for the gateway."""

from subs_gateway.shared.enums import HttpMethod, RequestOutcome
from subs_gateway.shared.observability import JSONFormatter, setup_logging
from subs_gateway.shared.value_objects import (
    CallerCredential,
    CallerIdentity,
    RouteKey,
)

__all__ = [
    "CallerCredential",
    "CallerIdentity",
    "HttpMethod",
    "JSONFormatter",
    "RequestOutcome",
    "RouteKey",
    "setup_logging",
]
