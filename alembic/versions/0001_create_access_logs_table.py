"""Create access_logs table."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_access_logs_table"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "access_logs",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("request_id", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.String(length=512), nullable=False),
        sa.Column("source_ip", sa.String(length=64), nullable=False),
        sa.Column("request_time", sa.String(length=32), nullable=False),
        sa.Column("request_time_epoch", sa.BigInteger(), nullable=False),
        sa.Column("http_method", sa.String(length=16), nullable=False),
        sa.Column("path", sa.String(length=2048), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("protocol", sa.String(length=16), nullable=False),
        sa.Column("response_length", sa.BigInteger(), nullable=False),
        sa.Column("domain_name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_index(
        "ix_access_logs_request_id", "access_logs", ["request_id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_access_logs_request_id", table_name="access_logs")
    op.drop_table("access_logs")
