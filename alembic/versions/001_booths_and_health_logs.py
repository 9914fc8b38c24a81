"""Create booths and health_logs tables."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "booths",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("booth_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("timezone", sa.Text(), nullable=True),
        sa.Column("operating_hours", sa.Text(), nullable=True),
        sa.Column("last_ping", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_booths_booth_id", "booths", ["booth_id"], unique=True)
    op.create_index("ix_booths_last_ping", "booths", ["last_ping"])

    op.create_table(
        "health_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booth_pk", sa.String(36), sa.ForeignKey("booths.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_health_logs_created_at", "health_logs", ["created_at"])
    op.create_index("ix_health_logs_booth_created", "health_logs", ["booth_pk", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_health_logs_booth_created", table_name="health_logs")
    op.drop_index("ix_health_logs_created_at", table_name="health_logs")
    op.drop_table("health_logs")
    op.drop_index("ix_booths_last_ping", table_name="booths")
    op.drop_index("ix_booths_booth_id", table_name="booths")
    op.drop_table("booths")
