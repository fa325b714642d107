"""Substitutions API front door package wiring and entrypoints."""

from subs_gateway.main import describe_routes, run_dev, run_prod
from subs_gateway.settings import GatewaySettings, get_settings

main = run_dev

__all__ = [
    "GatewaySettings",
    "describe_routes",
    "get_settings",
    "main",
    "run_dev",
    "run_prod",
]
