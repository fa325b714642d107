"""Capability protocol implemented by every backend unit.

The front door never knows what sits behind a route. It only needs an object
that accepts the original request and returns the backend's response, or
raises :class:`~subs_gateway.front_door.errors.BackendInvocationError` when
the backend reports a failure. Concrete adapters live in
:mod:`subs_gateway.backends`; tests provide in-process fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from subs_gateway.front_door.messages import BackendResponse, GatewayRequest


@runtime_checkable
class Invocable(Protocol):
    """Protocol describing an invocable backend unit."""

    async def invoke(
        self, request: GatewayRequest, *, budget_seconds: float
    ) -> BackendResponse:
        """Process *request* within *budget_seconds* and return the response."""


__all__ = ["Invocable"]
