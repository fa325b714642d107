"""Immutable value objects shared across the gateway layers."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.config import ConfigDict

from subs_gateway.shared.enums import HttpMethod


class RouteKey(BaseModel):
    """Exact ``(method, path)`` pair identifying a route."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    path: str = Field(..., min_length=1)

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value.startswith("/"):
            msg = f"Route path must start with '/': {value!r}"
            raise ValueError(msg)
        return value

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


class CallerCredential(BaseModel):
    """Signing secret and principal registered for one access key."""

    model_config = ConfigDict(frozen=True)

    secret_access_key: SecretStr
    principal: str = Field(..., min_length=1)


class CallerIdentity(BaseModel):
    """Principal resolved from a verified request signature."""

    model_config = ConfigDict(frozen=True)

    principal: str
    access_key_id: str


__all__ = ["CallerCredential", "CallerIdentity", "RouteKey"]
