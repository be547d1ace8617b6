"""
Orders API — Order SQLAlchemy Model
====================================

What:  ORM mapping of the `orders` table.
Why:   Column types and defaults are declared once and shared by the service
       and the migration autogenerate.
Who:  SqlOrderService for reads/writes; Alembic for schema management.

Table notes:
    - id: BIGINT identity; SQLite gets plain INTEGER so that ROWID aliasing
      gives it autoincrement
    - total_amount: NUMERIC(12, 2), never float
    - status: short string holding an OrderStatus value
    - created_at / updated_at: timezone-aware, always written in UTC

Indexes:
    idx_orders_created_at   default list ordering (scanned backwards for newest first)
    idx_orders_status       status filter on the list endpoint
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from orders_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    """Lifecycle states an order can be in."""

    NEW = "NEW"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base):
    """
    A customer order.

    Lifecycle:
        1. Inserted by create_order() with a database-assigned id
        2. Fully replaced by update_order(); updated_at moves forward
        3. Never deleted through the API
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    shipping_address: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        default="USD",
        server_default=text("'USD'"),
    )

    # Stored as the enum's value so raw SQL and the status filter can use plain strings
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OrderStatus.NEW.value,
        server_default=text("'NEW'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_orders_created_at", "created_at"),
        Index("idx_orders_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, status='{self.status}', "
            f"customer='{self.customer_name}')>"
        )
