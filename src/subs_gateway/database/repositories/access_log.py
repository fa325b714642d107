"""Repository helpers for working with access log records."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from subs_gateway.database.schemas import AccessLogSchema
from subs_gateway.front_door.access_log import AccessLogEntry


class AccessLogRepository:
    """Encapsulates persistence operations for :class:`AccessLogSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, entry: AccessLogEntry) -> AccessLogSchema:
        """Append *entry* to the access log table."""
        record = AccessLogSchema(**entry.model_dump())
        self._session.add(record)
        self._session.flush()
        return record

    def get_by_request_id(self, request_id: str) -> AccessLogSchema | None:
        """Return the record written for *request_id*."""
        stmt = select(AccessLogSchema).where(AccessLogSchema.request_id == request_id)
        return self._session.scalar(stmt)

    def list_recent(self, limit: int = 100) -> list[AccessLogSchema]:
        """Return up to *limit* records, newest first."""
        stmt = select(AccessLogSchema).order_by(AccessLogSchema.id.desc()).limit(limit)
        return list(self._session.scalars(stmt))
