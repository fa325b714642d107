"""Access log database schema."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from subs_gateway.database.base import BaseSchema


class AccessLogSchema(BaseSchema):
    """SQLAlchemy model for one access log entry."""

    __tablename__ = "access_logs"

    # SQLite only autoincrements INTEGER primary keys.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    request_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    user_agent: Mapped[str] = mapped_column(String(512), nullable=False)
    source_ip: Mapped[str] = mapped_column(String(64), nullable=False)
    request_time: Mapped[str] = mapped_column(String(32), nullable=False)
    request_time_epoch: Mapped[int] = mapped_column(BigInteger, nullable=False)
    http_method: Mapped[str] = mapped_column(String(16), nullable=False)
    path: Mapped[str] = mapped_column(String(2048), nullable=False)
    status: Mapped[int] = mapped_column(Integer, nullable=False)
    protocol: Mapped[str] = mapped_column(String(16), nullable=False)
    response_length: Mapped[int] = mapped_column(BigInteger, nullable=False)
    domain_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
