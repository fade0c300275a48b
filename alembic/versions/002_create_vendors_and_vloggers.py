"""create vendors and vloggers tables (id = owning user id)

Revision ID: 002
Revises: 001
Create Date: 2025-03-03

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "vendors",
        sa.Column("id", sa.String(36), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("cuisine_type", sa.String(100), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("promotion_tier", sa.String(50), nullable=True),
        sa.Column("featured_until", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "vloggers",
        sa.Column("id", sa.String(36), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("platform", sa.String(50), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("vloggers")
    op.drop_table("vendors")
