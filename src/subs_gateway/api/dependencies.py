"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from fastapi import Request

from subs_gateway.front_door import FrontDoor


def get_front_door(request: Request) -> FrontDoor:
    """Return the front door provisioned by the application lifespan."""

    front_door = getattr(request.app.state, "front_door", None)
    if front_door is None:
        msg = "The front door has not been provisioned; is the lifespan running?"
        raise RuntimeError(msg)
    return front_door


__all__ = ["get_front_door"]
