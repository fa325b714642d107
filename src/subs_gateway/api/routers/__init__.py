"""Route definitions for the public HTTP surface."""

from subs_gateway.api.routers.proxy import proxy_route

__all__ = ["proxy_route"]
