"""Per-route invoke grants and the policy that enforces them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from subs_gateway.front_door.errors import UnauthorizedError
from subs_gateway.shared import CallerIdentity, RouteKey


class Grant(BaseModel):
    """Permission for one principal to invoke one route."""

    model_config = ConfigDict(frozen=True)

    route: RouteKey
    principal: str = Field(..., min_length=1)


class AuthorizationPolicy:
    """Immutable map from route to the principals allowed to invoke it."""

    def __init__(self, grants: Iterable[Grant]) -> None:
        collected: dict[RouteKey, set[str]] = {}
        for grant in grants:
            collected.setdefault(grant.route, set()).add(grant.principal)
        self._grants: Mapping[RouteKey, frozenset[str]] = MappingProxyType(
            {route: frozenset(principals) for route, principals in collected.items()}
        )

    @classmethod
    def uniform(
        cls, routes: Iterable[RouteKey], principals: Iterable[str]
    ) -> AuthorizationPolicy:
        """Grant every principal in *principals* access to every route."""
        principal_list = tuple(principals)
        return cls(
            Grant(route=route, principal=principal)
            for route in routes
            for principal in principal_list
        )

    @property
    def routes(self) -> frozenset[RouteKey]:
        return frozenset(self._grants)

    def principals_for(self, route: RouteKey) -> frozenset[str]:
        """Return the principals granted *route*, possibly empty."""
        return self._grants.get(route, frozenset())

    def is_permitted(self, route: RouteKey, principal: str) -> bool:
        return principal in self.principals_for(route)

    def authorize(self, route: RouteKey, identity: CallerIdentity) -> None:
        """Raise :class:`UnauthorizedError` unless *identity* holds a grant."""
        if not self.is_permitted(route, identity.principal):
            raise UnauthorizedError(route, identity.principal)


__all__ = ["AuthorizationPolicy", "Grant"]
