"""Front-door domain layer: routing, caller authentication, grants, dispatch and access logging."""

from subs_gateway.front_door.access_log import (
    ACCESS_LOGGER_NAME,
    AccessLogEntry,
    AccessLogger,
    AccessLogSink,
    InMemoryAccessLogSink,
    LoggerAccessLogSink,
)
from subs_gateway.front_door.authentication import CredentialStore, SigV4Authenticator
from subs_gateway.front_door.authorization import AuthorizationPolicy, Grant
from subs_gateway.front_door.dispatch import Dispatcher
from subs_gateway.front_door.errors import (
    BackendError,
    BackendInvocationError,
    BackendTimeoutError,
    GatewayError,
    RouteNotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
)
from subs_gateway.front_door.gateway import FrontDoor
from subs_gateway.front_door.invocable import Invocable
from subs_gateway.front_door.messages import (
    BackendResponse,
    ErrorMessage,
    GatewayRequest,
    GatewayResponse,
)
from subs_gateway.front_door.routing import BackendReference, Route, RoutingTable

__all__ = [
    "ACCESS_LOGGER_NAME",
    "AccessLogEntry",
    "AccessLogSink",
    "AccessLogger",
    "AuthorizationPolicy",
    "BackendError",
    "BackendInvocationError",
    "BackendReference",
    "BackendResponse",
    "BackendTimeoutError",
    "CredentialStore",
    "Dispatcher",
    "ErrorMessage",
    "FrontDoor",
    "GatewayError",
    "GatewayRequest",
    "GatewayResponse",
    "Grant",
    "InMemoryAccessLogSink",
    "Invocable",
    "LoggerAccessLogSink",
    "Route",
    "RouteNotFoundError",
    "RoutingTable",
    "SigV4Authenticator",
    "UnauthenticatedError",
    "UnauthorizedError",
]
