"""Initial schema – users

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17

Creates the users table, including the reset-secret columns used by the
password-reset flow.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        # OTP code or hex token – set and cleared together with the expiry
        sa.Column("reset_secret", sa.String(128), nullable=True),
        sa.Column("reset_secret_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # Emails are stored normalized, so a plain unique index enforces
    # case-insensitive uniqueness.
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    # Token-variant lookups go straight to the secret
    op.create_index("ix_users_reset_secret", "users", ["reset_secret"])


def downgrade() -> None:
    op.drop_index("ix_users_reset_secret", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
