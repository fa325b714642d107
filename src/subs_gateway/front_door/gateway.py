"""Request pipeline composing authentication, routing, grants and dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from subs_gateway.front_door.access_log import AccessLogEntry, AccessLogger
from subs_gateway.front_door.dispatch import Dispatcher
from subs_gateway.front_door.errors import BackendError, GatewayError
from subs_gateway.front_door.messages import ErrorMessage, GatewayResponse
from subs_gateway.shared import RequestOutcome

if TYPE_CHECKING:
    from subs_gateway.front_door.authentication import SigV4Authenticator
    from subs_gateway.front_door.authorization import AuthorizationPolicy
    from subs_gateway.front_door.messages import GatewayRequest
    from subs_gateway.front_door.routing import RoutingTable

logger = logging.getLogger(__name__)

_JSON_HEADERS = (("content-type", "application/json"),)


class FrontDoor:
    """Single entry point handling every request that reaches the gateway.

    A request is authenticated first, then matched against the routing
    table, then checked against the grants of the matched route and only
    then forwarded to its backend. Each request produces exactly one
    response and exactly one access log entry.
    """

    def __init__(
        self,
        *,
        routing_table: RoutingTable,
        policy: AuthorizationPolicy,
        authenticator: SigV4Authenticator,
        access_logger: AccessLogger,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        unknown = [route for route in policy.routes if route not in routing_table]
        if unknown:
            names = ", ".join(sorted(str(route) for route in unknown))
            msg = f"Grants reference unknown routes: {names}."
            raise ValueError(msg)
        self._routing_table = routing_table
        self._policy = policy
        self._authenticator = authenticator
        self._access_logger = access_logger
        self._dispatcher = dispatcher or Dispatcher()

    @property
    def routing_table(self) -> RoutingTable:
        return self._routing_table

    @property
    def policy(self) -> AuthorizationPolicy:
        return self._policy

    @property
    def access_logger(self) -> AccessLogger:
        return self._access_logger

    async def start(self) -> None:
        await self._access_logger.start()

    async def stop(self) -> None:
        await self._access_logger.stop()

    async def handle(self, request: GatewayRequest) -> GatewayResponse:
        """Run *request* through the pipeline and return the caller's response."""
        try:
            identity = self._authenticator.authenticate(request)
            route = self._routing_table.match(request.method, request.path)
            self._policy.authorize(route.key, identity)
            backend_response = await self._dispatcher.dispatch(route, request)
        except BackendError as exc:
            response = GatewayResponse(
                status_code=exc.status_code,
                outcome=exc.outcome,
                headers=exc.headers,
                body=exc.body,
            )
            self._log_failure(request, exc)
        except GatewayError as exc:
            response = _error_response(exc)
            self._log_failure(request, exc)
        except Exception:
            logger.exception(
                "%s %s failed unexpectedly",
                request.method,
                request.path,
                extra={"request_id": request.request_id},
            )
            response = GatewayResponse(
                status_code=500,
                outcome=RequestOutcome.INTERNAL_ERROR,
                headers=_JSON_HEADERS,
                body=ErrorMessage(message="Internal Server Error")
                .model_dump_json()
                .encode(),
            )
        else:
            response = GatewayResponse.from_backend(backend_response)
            logger.info(
                "%s %s -> %s",
                request.method,
                request.path,
                response.status_code,
                extra={
                    "request_id": request.request_id,
                    "route": str(route.key),
                    "outcome": str(response.outcome),
                    "status": response.status_code,
                    "principal": identity.principal,
                    "backend": route.backend.name,
                },
            )

        self._access_logger.emit(AccessLogEntry.from_exchange(request, response))
        return response

    @staticmethod
    def _log_failure(request: GatewayRequest, error: GatewayError) -> None:
        logger.warning(
            "%s %s failed: %s",
            request.method,
            request.path,
            error,
            extra={
                "request_id": request.request_id,
                "outcome": str(error.outcome),
                "status": error.status_code,
            },
        )


def _error_response(error: GatewayError) -> GatewayResponse:
    body = ErrorMessage(message=error.public_message).model_dump_json().encode()
    return GatewayResponse(
        status_code=error.status_code,
        outcome=error.outcome,
        headers=_JSON_HEADERS,
        body=body,
    )


__all__ = ["FrontDoor"]
