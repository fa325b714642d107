"""Shared enumerations used across the gateway."""

from enum import StrEnum


class HttpMethod(StrEnum):
    """HTTP verbs a route can be bound to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class RequestOutcome(StrEnum):
    """Terminal state reached by a request in the front-door pipeline."""

    RESPONDED = "responded"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    BACKEND_ERROR = "backend_error"
    INTERNAL_ERROR = "internal_error"
