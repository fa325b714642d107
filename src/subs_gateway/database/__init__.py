"""Database connectivity helpers and the access log persistence layer."""

from subs_gateway.database.base import BaseSchema
from subs_gateway.database.repositories import AccessLogRepository
from subs_gateway.database.schemas import AccessLogSchema
from subs_gateway.database.service import DatabaseService
from subs_gateway.database.sink import DatabaseAccessLogSink

__all__ = [
    "AccessLogRepository",
    "AccessLogSchema",
    "BaseSchema",
    "DatabaseAccessLogSink",
    "DatabaseService",
]
