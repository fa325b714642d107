"""Access log entries, sinks and the asynchronous logger that feeds them.

Every request handled by the front door yields exactly one
:class:`AccessLogEntry`. Entries are queued without awaiting and written to
the configured sink by a background task, so a slow or failing sink can
neither delay nor change a response.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from subs_gateway.front_door.messages import GatewayRequest, GatewayResponse

logger = logging.getLogger(__name__)

ACCESS_LOGGER_NAME = "subs_gateway.access"
REQUEST_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"
DEFAULT_QUEUE_SIZE = 10_000


class AccessLogEntry(BaseModel):
    """One record per request, serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    request_id: str
    user_agent: str
    source_ip: str
    request_time: str
    request_time_epoch: int = Field(..., ge=0)
    http_method: str
    path: str
    status: int
    protocol: str
    response_length: int = Field(..., ge=0)
    domain_name: str

    @classmethod
    def from_exchange(
        cls, request: GatewayRequest, response: GatewayResponse
    ) -> AccessLogEntry:
        """Build the entry describing *request* and the *response* it received."""
        received_at = request.received_at
        return cls(
            request_id=request.request_id,
            user_agent=request.user_agent,
            source_ip=request.source_ip,
            request_time=received_at.strftime(REQUEST_TIME_FORMAT),
            request_time_epoch=int(received_at.timestamp() * 1000),
            http_method=request.method,
            path=request.path,
            status=response.status_code,
            protocol=request.protocol,
            response_length=len(response.body),
            domain_name=request.domain_name,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class AccessLogSink(Protocol):
    """Append-only destination for access log entries."""

    def write(self, entry: AccessLogEntry) -> None:
        """Persist *entry*; implementations may block."""


class InMemoryAccessLogSink:
    """Collects entries in a list."""

    def __init__(self) -> None:
        self._entries: list[AccessLogEntry] = []

    def write(self, entry: AccessLogEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[AccessLogEntry, ...]:
        return tuple(self._entries)


class LoggerAccessLogSink:
    """Emit each entry as one JSON line on a dedicated logger."""

    def __init__(self, logger_name: str = ACCESS_LOGGER_NAME) -> None:
        self._logger = logging.getLogger(logger_name)

    def write(self, entry: AccessLogEntry) -> None:
        self._logger.info(entry.to_json())


class AccessLogger:
    """Best-effort asynchronous writer in front of an :class:`AccessLogSink`."""

    def __init__(
        self, sink: AccessLogSink, *, max_queue_size: int = DEFAULT_QUEUE_SIZE
    ) -> None:
        if max_queue_size < 0:
            msg = "Queue size must be non-negative."
            raise ValueError(msg)
        self._sink = sink
        self._max_queue_size = max_queue_size
        self._queue: asyncio.Queue[AccessLogEntry] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._dropped = 0

    @property
    def sink(self) -> AccessLogSink:
        return self._sink

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def dropped(self) -> int:
        """Number of entries discarded because the logger was full or stopped."""
        return self._dropped

    async def start(self) -> None:
        """Start the background writer on the running event loop."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._worker = asyncio.create_task(self._drain(self._queue))

    async def stop(self) -> None:
        """Flush queued entries, then stop the background writer."""
        if self._queue is None or self._worker is None:
            return
        if not self._worker.done():
            await self._queue.join()
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._queue = None
        self._worker = None

    def emit(self, entry: AccessLogEntry) -> None:
        """Queue *entry* without waiting; drop it if it cannot be queued."""
        if self._queue is None or not self.running:
            self._dropped += 1
            return
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self._dropped += 1

    async def _drain(self, queue: asyncio.Queue[AccessLogEntry]) -> None:
        while True:
            entry = await queue.get()
            try:
                await asyncio.to_thread(self._sink.write, entry)
            except Exception:
                logger.warning(
                    "Access log sink rejected an entry",
                    exc_info=True,
                    extra={"request_id": entry.request_id},
                )
            finally:
                queue.task_done()


__all__ = [
    "ACCESS_LOGGER_NAME",
    "AccessLogEntry",
    "AccessLogSink",
    "AccessLogger",
    "InMemoryAccessLogSink",
    "LoggerAccessLogSink",
]
