"""Request and response envelopes passed through the front door."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel

from subs_gateway.shared import RequestOutcome

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "content-length",
        "keep-alive",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


def _new_request_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True, frozen=True)
class GatewayRequest:
    """Incoming HTTP request as seen by the front door.

    Header names are stored lower-cased, in arrival order, with repeated
    headers kept as separate pairs. ``path`` is the decoded path used for
    routing while ``raw_path`` keeps the path exactly as sent; ``query_string``
    is the raw, still percent-encoded query without the leading ``?``.
    """

    method: str
    path: str
    raw_path: str = ""
    query_string: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    source_ip: str = ""
    protocol: str = "HTTP/1.1"
    request_id: str = field(default_factory=_new_request_id)
    received_at: datetime = field(default_factory=_now)

    def header(self, name: str) -> str | None:
        """Return the first value of header *name*, if present."""
        lowered = name.lower()
        for key, value in self.headers:
            if key == lowered:
                return value
        return None

    def header_values(self, name: str) -> list[str]:
        """Return every value sent for header *name*."""
        lowered = name.lower()
        return [value for key, value in self.headers if key == lowered]

    @property
    def domain_name(self) -> str:
        return self.header("host") or ""

    @property
    def user_agent(self) -> str:
        return self.header("user-agent") or ""


@dataclass(slots=True, frozen=True)
class BackendResponse:
    """Response produced by a backend unit."""

    status_code: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""


@dataclass(slots=True, frozen=True)
class GatewayResponse:
    """Final response returned to the caller with the outcome that produced it."""

    status_code: int
    outcome: RequestOutcome
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""

    @classmethod
    def from_backend(cls, response: BackendResponse) -> GatewayResponse:
        return cls(
            status_code=response.status_code,
            outcome=RequestOutcome.RESPONDED,
            headers=response.headers,
            body=response.body,
        )


class ErrorMessage(BaseModel):
    """JSON body returned for failures raised by the front door itself."""

    message: str


def end_to_end_headers(
    headers: tuple[tuple[str, str], ...],
) -> tuple[tuple[str, str], ...]:
    """Drop hop-by-hop headers, which are owned by each connection."""
    return tuple(
        (name, value) for name, value in headers if name.lower() not in HOP_BY_HOP_HEADERS
    )


__all__ = [
    "HOP_BY_HOP_HEADERS",
    "BackendResponse",
    "ErrorMessage",
    "GatewayRequest",
    "GatewayResponse",
    "end_to_end_headers",
]
