"""API layer exposing the front door over HTTP."""

from subs_gateway.api.app import create_api

__all__ = ["create_api"]
