"""Front door entrypoints."""

from __future__ import annotations

import json
import sys

import uvicorn

from subs_gateway.api.services import describe_front_door, provision_front_door
from subs_gateway.settings import get_settings


def _run_uvicorn(*, reload: bool) -> None:
    """Start uvicorn with a consistent configuration."""
    config = get_settings()
    uvicorn.run(
        "subs_gateway.api:create_api",
        factory=True,
        host=config.api_host,
        port=config.api_port,
        reload=reload,
        access_log=False,
    )


def run_dev() -> None:
    """Run the development ASGI server with auto-reload."""
    _run_uvicorn(reload=True)


def run_prod() -> None:
    """Run the production ASGI server without auto-reload."""
    _run_uvicorn(reload=False)


def describe_routes() -> None:
    """Print the provisioned routing table, budgets and grants as JSON."""
    front_door = provision_front_door(get_settings())
    json.dump(describe_front_door(front_door), sys.stdout, indent=2)
    sys.stdout.write("\n")
