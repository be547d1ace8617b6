"""Create orders table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

Mirrors orders_api/models/order.py. BIGINT identity key (INTEGER on SQLite),
NUMERIC(12, 2) amounts, timezone-aware timestamps.
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
        "orders",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("shipping_address", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "currency",
            sa.String(3),
            nullable=False,
            server_default=sa.text("'USD'"),
        ),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'NEW'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_orders_created_at",
        "orders",
        ["created_at"],
    )
    op.create_index("idx_orders_status", "orders", ["status"])


def downgrade() -> None:
    """Drops the table and every order in it."""
    op.drop_index("idx_orders_status", table_name="orders")
    op.drop_index("idx_orders_created_at", table_name="orders")
    op.drop_table("orders")
