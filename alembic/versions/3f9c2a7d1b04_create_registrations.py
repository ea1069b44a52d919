"""Create registrations table

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2025-12-12 19:05:41.218334

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "registrations",
        sa.Column("id", sa.VARCHAR(length=36), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("email", sa.VARCHAR(), nullable=False),
        sa.Column("phone", sa.VARCHAR(), nullable=True),
        sa.Column(
            "has_joined_cg",
            sa.BOOLEAN(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("connect_group", sa.VARCHAR(), nullable=True),
        sa.Column("food_item", sa.VARCHAR(), nullable=True),
        sa.Column("drink_item", sa.VARCHAR(), nullable=True),
        sa.Column(
            "bringing_gift",
            sa.BOOLEAN(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.Column("transfer_proof", sa.TEXT(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Listing is always newest first
    op.create_index(
        "ix_registrations_created_at", "registrations", ["created_at"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_registrations_created_at", table_name="registrations")
    op.drop_table("registrations")
