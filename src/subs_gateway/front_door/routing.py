"""Immutable routing table mapping ``(method, path)`` to backend units."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from subs_gateway.front_door.errors import RouteNotFoundError
from subs_gateway.front_door.invocable import Invocable  # noqa: TC001
from subs_gateway.shared import HttpMethod, RouteKey


class BackendReference(BaseModel):
    """Handle to a backend unit with its budget and provisioned environment."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    invocable: Invocable
    budget_seconds: float = Field(..., gt=0)
    environment: Mapping[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _freeze_environment(self) -> BackendReference:
        """Ensure the environment bundle cannot be mutated after provisioning."""
        object.__setattr__(
            self, "environment", MappingProxyType(dict(self.environment))
        )
        return self

    def describe(self) -> dict[str, Any]:
        """Return a JSON-friendly description without the invocable."""
        return {
            "name": self.name,
            "target": self.target,
            "budget_seconds": self.budget_seconds,
            "environment": dict(self.environment),
        }


class Route(BaseModel):
    """A ``(method, path)`` pair bound to exactly one backend unit."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: RouteKey
    backend: BackendReference

    @property
    def method(self) -> HttpMethod:
        return self.key.method

    @property
    def path(self) -> str:
        return self.key.path

    @property
    def budget_seconds(self) -> float:
        return self.backend.budget_seconds


class RoutingTable:
    """Read-only lookup of routes by exact method and path."""

    def __init__(self, routes: Iterable[Route]) -> None:
        table: dict[tuple[str, str], Route] = {}
        for route in routes:
            lookup_key = (str(route.method), route.path)
            if lookup_key in table:
                msg = f"Duplicate route {route.key}."
                raise ValueError(msg)
            table[lookup_key] = route
        self._routes: Mapping[tuple[str, str], Route] = MappingProxyType(table)

    def match(self, method: str, path: str) -> Route:
        """Return the route registered for *method* and *path*.

        Matching is exact on both parts: no wildcards, no path parameters,
        no trailing-slash folding and no case folding.
        """
        route = self._routes.get((method, path))
        if route is None:
            raise RouteNotFoundError(method, path)
        return route

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, RouteKey):
            return False
        return (str(key.method), key.path) in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)


__all__ = ["BackendReference", "Route", "RoutingTable"]
