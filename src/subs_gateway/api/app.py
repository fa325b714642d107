"""Factory for constructing the FastAPI application."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subs_gateway.api.routers import proxy_route
from subs_gateway.api.services import provision_front_door
from subs_gateway.settings import GatewaySettings, get_settings
from subs_gateway.shared import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from subs_gateway.front_door import FrontDoor


def create_api(
    front_door: FrontDoor | None = None,
    *,
    settings: GatewaySettings | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    When *front_door* is omitted it is provisioned from settings on startup.
    """
    config = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(config.log_level, config.log_format)
        door = front_door or provision_front_door(config)
        app.state.front_door = door
        await door.start()
        try:
            yield
        finally:
            await door.stop()

    app = FastAPI(title=f"{config.api_name} API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )
    app.router.routes.append(proxy_route)
    return app
