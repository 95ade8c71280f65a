"""Like counters table.

Revision ID: 001
Revises: None
Create Date: 2025-12-22
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "like_counters",
        sa.Column("class_id", sa.String(200), primary_key=True),
        sa.Column("count", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("count >= 0", name="ck_like_counters_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("like_counters")
