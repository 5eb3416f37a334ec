from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_webhook_events"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "webhook_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("delivery_id", sa.String(length=255), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("repository_name", sa.String(length=255), nullable=True),
        sa.Column("sender_login", sa.String(length=255), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=True),
        sa.Column(
            "payload", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        comment="Stores GitHub webhook events for push, issue_comment, and pull_request events",
    )
    op.create_index("uix_webhook_events_delivery_id", "webhook_events", ["delivery_id"], unique=True)
    op.create_index("idx_webhook_events_event_type", "webhook_events", ["event_type"])
    op.create_index("idx_webhook_events_repository", "webhook_events", ["repository_name"])
    op.create_index("idx_webhook_events_sender", "webhook_events", ["sender_login"])
    op.create_index("idx_webhook_events_created_at", "webhook_events", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_webhook_events_created_at", table_name="webhook_events")
    op.drop_index("idx_webhook_events_sender", table_name="webhook_events")
    op.drop_index("idx_webhook_events_repository", table_name="webhook_events")
    op.drop_index("idx_webhook_events_event_type", table_name="webhook_events")
    op.drop_index("uix_webhook_events_delivery_id", table_name="webhook_events")
    op.drop_table("webhook_events")
