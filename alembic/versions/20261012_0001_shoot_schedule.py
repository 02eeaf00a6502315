"""Create shoot schedule table.

Revision ID: 20261012_0001
Revises:
Create Date: 2026-10-12 10:15:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20261012_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "shootschedule",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_id", sa.String(length=64), nullable=False),
        sa.Column("version_label", sa.String(length=32), nullable=False, server_default="v1"),
        sa.Column("content_fingerprint", sa.String(length=64), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_scenes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("optimization_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_shootschedule_project_id", "shootschedule", ["project_id"])
    op.create_index("ix_shootschedule_content_fingerprint", "shootschedule", ["content_fingerprint"])


def downgrade() -> None:
    op.drop_index("ix_shootschedule_content_fingerprint", table_name="shootschedule")
    op.drop_index("ix_shootschedule_project_id", table_name="shootschedule")
    op.drop_table("shootschedule")
