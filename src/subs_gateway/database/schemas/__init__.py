"""SQLAlchemy schemas."""

from subs_gateway.database.schemas.access_log import AccessLogSchema

__all__ = ["AccessLogSchema"]
