"""initial schema

Revision ID: 001
Revises:
Create Date: 2025-09-09 07:52:15.000000
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── watchlists ──
    op.create_table(
        "watchlists",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("terms", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ── events ──
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("type", sa.String(128), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "watchlist_id",
            sa.Uuid(),
            sa.ForeignKey("watchlists.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("ai_summary", sa.Text, nullable=True),
        sa.Column("ai_severity", sa.String(16), nullable=True),
        sa.Column("ai_suggested_action", sa.Text, nullable=True),
        sa.Column("ai_processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "ai_severity IS NULL OR ai_severity IN ('LOW', 'MED', 'HIGH', 'CRITICAL')",
            name="ck_events_ai_severity",
        ),
        sa.CheckConstraint(
            "(ai_summary IS NULL AND ai_severity IS NULL"
            " AND ai_suggested_action IS NULL AND ai_processed_at IS NULL)"
            " OR (ai_summary IS NOT NULL AND ai_severity IS NOT NULL"
            " AND ai_suggested_action IS NOT NULL AND ai_processed_at IS NOT NULL)",
            name="ck_events_analysis_all_or_none",
        ),
    )
    op.create_index("ix_events_watchlist_id", "events", ["watchlist_id"])
    op.create_index("ix_events_ai_severity", "events", ["ai_severity"])


def downgrade() -> None:
    op.drop_index("ix_events_ai_severity", table_name="events")
    op.drop_index("ix_events_watchlist_id", table_name="events")
    op.drop_table("events")
    op.drop_table("watchlists")
