"""Create provider_identities table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the provider_identities table."""
    op.create_table(
        "provider_identities",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "provider",
            sa.String(50),
            nullable=False,
            comment="OAuth provider: 'github' or 'google'",
        ),
        sa.Column(
            "provider_user_id",
            sa.String(255),
            nullable=False,
            comment="Subject id assigned by the OAuth provider",
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_provider_identities")),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_provider_identities_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "provider",
            "provider_user_id",
            name=op.f("uq_provider_identities_provider_provider_user_id"),
        ),
    )
    op.create_index(
        op.f("ix_provider_identities_user_id"),
        "provider_identities",
        ["user_id"],
    )


def downgrade() -> None:
    """Drop the provider_identities table."""
    op.drop_index(
        op.f("ix_provider_identities_user_id"),
        table_name="provider_identities",
    )
    op.drop_table("provider_identities")
