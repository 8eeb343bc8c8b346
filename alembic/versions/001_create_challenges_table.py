"""Create challenges table

Revision ID: 001
Revises: None
Create Date: 2024-01-08 00:00:00.000000+00:00

What:  Creates the `challenges` table holding one registration puzzle per user.
How:   user_id primary key (the uniqueness insert-if-absent relies on),
       JSON puzzle columns, BIGINT solution, progress counters.

Rollback: downgrade() drops the table entirely (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "challenges",

        sa.Column(
            "user_id",
            sa.String(255),
            nullable=False,
            comment="Authenticated user identifier (opaque, owned by the auth service)",
        ),

        # Puzzle as generated
        sa.Column("people", sa.JSON(), nullable=False, comment="Person name to integer weight"),
        sa.Column(
            "alliances",
            sa.JSON(),
            nullable=False,
            comment="Undirected alliance edges as name pairs",
        ),
        sa.Column(
            "solution",
            sa.BigInteger(),
            nullable=False,
            comment="Hidden target sum; never serialized",
        ),

        # Progress
        sa.Column(
            "attempts",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of submissions made",
        ),
        sa.Column(
            "complete",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Set once on the first correct submission",
        ),

        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this challenge was generated (UTC)",
        ),

        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Drop the challenges table. All challenge progress is lost."""
    op.drop_table("challenges")
