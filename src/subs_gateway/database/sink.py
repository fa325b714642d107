"""Access log sink backed by the ``access_logs`` table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from subs_gateway.database.repositories import AccessLogRepository

if TYPE_CHECKING:
    from subs_gateway.database.service import DatabaseService
    from subs_gateway.front_door.access_log import AccessLogEntry


class DatabaseAccessLogSink:
    """Write each entry in its own short transaction."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def write(self, entry: AccessLogEntry) -> None:
        with self._database.session() as session:
            AccessLogRepository(session).add(entry)


__all__ = ["DatabaseAccessLogSink"]
