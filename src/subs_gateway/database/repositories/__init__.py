"""Repositories."""

from subs_gateway.database.repositories.access_log import AccessLogRepository

__all__ = ["AccessLogRepository"]
