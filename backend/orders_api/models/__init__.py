"""
Orders API — ORM Models
========================

Importing this package registers every table on Base.metadata, which is what
Alembic autogenerate and the test fixtures rely on.
"""

from orders_api.models.order import Order, OrderStatus

__all__ = ["Order", "OrderStatus"]
