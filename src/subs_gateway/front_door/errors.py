"""Error taxonomy of the front-door pipeline."""

from __future__ import annotations

from subs_gateway.shared import RequestOutcome, RouteKey


class GatewayError(Exception):
    """Base class for failures the front door surfaces to the caller."""

    status_code: int = 500
    outcome: RequestOutcome = RequestOutcome.BACKEND_ERROR
    public_message: str = "Internal Server Error"


class UnauthenticatedError(GatewayError):
    """Raised when a request carries no valid caller identity."""

    status_code = 401
    outcome = RequestOutcome.UNAUTHENTICATED
    public_message = "Unauthorized"


class UnauthorizedError(GatewayError):
    """Raised when an authenticated caller holds no grant for the route."""

    status_code = 403
    outcome = RequestOutcome.UNAUTHORIZED
    public_message = "Forbidden"

    def __init__(self, route: RouteKey, principal: str) -> None:
        super().__init__(f"{principal} holds no invoke grant for {route}")
        self.route = route
        self.principal = principal


class RouteNotFoundError(GatewayError):
    """Raised when no route matches the request method and path."""

    status_code = 404
    outcome = RequestOutcome.NOT_FOUND
    public_message = "Not Found"

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No route for {method} {path}")
        self.method = method
        self.path = path


class BackendTimeoutError(GatewayError):
    """Raised when a backend exceeds the execution budget of its route."""

    status_code = 504
    outcome = RequestOutcome.TIMEOUT
    public_message = "Endpoint request timed out"

    def __init__(self, route: RouteKey, budget_seconds: float) -> None:
        super().__init__(f"{route} exceeded its {budget_seconds:g}s budget")
        self.route = route
        self.budget_seconds = budget_seconds


class BackendError(GatewayError):
    """Backend-reported failure, surfaced with the backend's own payload."""

    outcome = RequestOutcome.BACKEND_ERROR

    def __init__(
        self,
        route: RouteKey,
        *,
        status_code: int = 502,
        headers: tuple[tuple[str, str], ...] = (),
        body: bytes = b"",
    ) -> None:
        super().__init__(f"{route} backend failed with status {status_code}")
        self.route = route
        self.status_code = status_code
        self.headers = headers
        self.body = body


class BackendInvocationError(Exception):
    """Raised by an invocable when the backend reports a failure."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 502,
        headers: tuple[tuple[str, str], ...] = (),
        body: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.headers = headers
        self.body = body


__all__ = [
    "BackendError",
    "BackendInvocationError",
    "BackendTimeoutError",
    "GatewayError",
    "RouteNotFoundError",
    "UnauthenticatedError",
    "UnauthorizedError",
]
