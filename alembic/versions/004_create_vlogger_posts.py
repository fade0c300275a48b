"""create vlogger_posts table

Revision ID: 004
Revises: 003
Create Date: 2025-03-05

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "vlogger_posts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("vlogger_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendors.id"), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(1024), nullable=False),
        sa.Column("screenshot_url", sa.String(1024), nullable=True),
        sa.Column("platform", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING", index=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("payout_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("reviewed_by_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("vlogger_posts")
