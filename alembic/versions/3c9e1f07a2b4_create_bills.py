"""create bills

Revision ID: 3c9e1f07a2b4
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3c9e1f07a2b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bills",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("type", sa.String(64), nullable=False, server_default=""),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
        sa.Column("date", sa.String(10), nullable=False, server_default=""),
        sa.Column("amount", sa.Integer, nullable=True),
        sa.Column("vat", sa.String(32), nullable=False, server_default=""),
        sa.Column("pct", sa.Integer, nullable=True),
        sa.Column("commentary", sa.Text, nullable=False, server_default=""),
        sa.Column("file_name", sa.Text, nullable=True),
        sa.Column("file_path", sa.Text, nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("comment_admin", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_bills_email", "bills", ["email"])


def downgrade() -> None:
    op.drop_index("ix_bills_email", table_name="bills")
    op.drop_table("bills")
