"""initial_migration

Revision ID: 4c1d2e8f9a01
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d2e8f9a01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOTIFY_FUNCTION = """
CREATE OR REPLACE FUNCTION notify_tracked_email_inserted() RETURNS trigger AS $$
BEGIN
    -- Identifiers only: NOTIFY payloads are capped at 8000 bytes and the row itself is read back by the stream
    PERFORM pg_notify(
        'tracked_email_inserted',
        json_build_object(
            'user_id', (SELECT user_id FROM sender_mail_ids WHERE id = NEW.sender_mail_id),
            'id', NEW.id,
            'sender_mail_id', NEW.sender_mail_id
        )::text
    );
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;
"""


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "sender_mail_ids",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "email", name="uq_sender_mail_ids_user_id_email"),
    )
    op.create_index(op.f("ix_sender_mail_ids_user_id"), "sender_mail_ids", ["user_id"], unique=False)
    op.create_table(
        "connected_accounts",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("provider", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False, comment="Encrypted access token"),
        sa.Column("refresh_token", sa.Text(), nullable=True, comment="Encrypted refresh token"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_connected_accounts_user_id"), "connected_accounts", ["user_id"], unique=False)
    op.create_table(
        "emails",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("sender_mail_id", sa.UUID(), nullable=False),
        sa.Column("sender_email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.Text(), server_default="", nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("received_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["sender_mail_id"], ["sender_mail_ids.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_emails_sender_mail_id_received_at", "emails", ["sender_mail_id", "received_at"], unique=False
    )

    op.execute(NOTIFY_FUNCTION)
    op.execute(
        "CREATE TRIGGER tracked_email_inserted AFTER INSERT ON emails "
        "FOR EACH ROW EXECUTE FUNCTION notify_tracked_email_inserted()"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS tracked_email_inserted ON emails")
    op.execute("DROP FUNCTION IF EXISTS notify_tracked_email_inserted()")
    op.drop_index("ix_emails_sender_mail_id_received_at", table_name="emails")
    op.drop_table("emails")
    op.drop_index(op.f("ix_connected_accounts_user_id"), table_name="connected_accounts")
    op.drop_table("connected_accounts")
    op.drop_index(op.f("ix_sender_mail_ids_user_id"), table_name="sender_mail_ids")
    op.drop_table("sender_mail_ids")
