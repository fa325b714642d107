"""Budgeted forwarding of authorized requests to backend units."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from subs_gateway.front_door.errors import (
    BackendError,
    BackendInvocationError,
    BackendTimeoutError,
)
from subs_gateway.front_door.messages import ErrorMessage

if TYPE_CHECKING:
    from subs_gateway.front_door.messages import BackendResponse, GatewayRequest
    from subs_gateway.front_door.routing import Route

logger = logging.getLogger(__name__)


class Dispatcher:
    """Invoke the backend bound to a route exactly once, within its budget."""

    async def dispatch(self, route: Route, request: GatewayRequest) -> BackendResponse:
        """Forward *request* unmodified and return the backend response.

        The call is abandoned once the route budget elapses. Failures are
        never retried.
        """
        budget = route.budget_seconds
        invocation = route.backend.invocable.invoke(request, budget_seconds=budget)
        try:
            return await asyncio.wait_for(invocation, timeout=budget)
        except TimeoutError as exc:
            raise BackendTimeoutError(route.key, budget) from exc
        except BackendInvocationError as exc:
            raise BackendError(
                route.key,
                status_code=exc.status_code,
                headers=exc.headers,
                body=exc.body,
            ) from exc
        except Exception as exc:
            logger.exception(
                "Backend %s raised an unexpected error",
                route.backend.name,
                extra={"request_id": request.request_id, "route": str(route.key)},
            )
            raise BackendError(
                route.key,
                headers=(("content-type", "application/json"),),
                body=ErrorMessage(message="Internal Server Error")
                .model_dump_json()
                .encode(),
            ) from exc


__all__ = ["Dispatcher"]
