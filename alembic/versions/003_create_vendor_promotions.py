"""create vendor_promotions table, one ACTIVE promotion per vendor

Revision ID: 003
Revises: 002
Create Date: 2025-03-04

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "vendor_promotions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendors.id"), nullable=False, index=True),
        sa.Column("package_id", sa.String(50), nullable=False),
        sa.Column("package_name", sa.String(100), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration", sa.String(20), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("payment_id", sa.String(64), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=False, server_default="test"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="completed"),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    # One ACTIVE per vendor (partial unique index); concurrent purchases race here
    op.create_index(
        "ix_vendor_promotions_vendor_id_active",
        "vendor_promotions",
        ["vendor_id"],
        unique=True,
        postgresql_where=text("status = 'ACTIVE'"),
        sqlite_where=text("status = 'ACTIVE'"),
    )


def downgrade() -> None:
    op.drop_index(
        "ix_vendor_promotions_vendor_id_active",
        table_name="vendor_promotions",
    )
    op.drop_table("vendor_promotions")
