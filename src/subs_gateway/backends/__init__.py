"""Concrete backend adapters implementing the :class:`Invocable` protocol."""

from __future__ import annotations

from subs_gateway.backends.http_invocable import HttpInvocable
from subs_gateway.backends.lambda_invocable import LambdaInvocable
from subs_gateway.front_door.invocable import Invocable  # noqa: TC001

_HTTP_SCHEMES = ("http://", "https://")


def build_invocable(target: str, *, budget_seconds: float, region: str) -> Invocable:
    """Return the adapter for *target*: an HTTP service URL or a Lambda function."""
    if target.startswith(_HTTP_SCHEMES):
        return HttpInvocable(target)
    return LambdaInvocable(
        target, region=region, read_timeout_seconds=budget_seconds
    )


__all__ = ["HttpInvocable", "LambdaInvocable", "build_invocable"]
