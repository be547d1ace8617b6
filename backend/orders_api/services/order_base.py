"""
Orders API — Abstract Order Service Interface
==============================================

What:  The contract the orders router depends on.
Why:   Route handlers stay free of SQL, and route tests run without a database.
How:  SqlOrderService implements it against the database; the test suite
       swaps in an in-memory implementation through FastAPI's
       dependency_overrides.

Contract:
    - Absence is a value, not an error: get_order() and update_order()
      return None for unknown ids
    - get_orders() owns every filtering, sorting and paging decision; callers
      pass the raw query parameters through
    - Requests the service cannot honour (unknown sort field, bad direction)
      raise orders_api.exceptions.ValidationError
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from orders_api.schemas.order import OrderIncoming, OrderPage, OrderResponse


class OrderService(ABC):
    """Create, read, update and list orders."""

    @abstractmethod
    async def create_order(self, incoming: OrderIncoming) -> OrderResponse:
        """Persist a new order and return it with its assigned id."""
        ...

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[OrderResponse]:
        """Return the order with this id, or None."""
        ...

    @abstractmethod
    async def update_order(
        self, order_id: int, incoming: OrderIncoming
    ) -> Optional[OrderResponse]:
        """
        Replace the client-owned fields of an existing order.

        Returns:
            The updated order, or None when no order has this id.
        """
        ...

    @abstractmethod
    async def get_orders(
        self,
        page: int,
        size: int,
        sort_field: str,
        direction: str,
        statuses: Optional[Sequence[str]] = None,
        search: Optional[str] = None,
    ) -> OrderPage:
        """
        Return one page of orders.

        Args:
            page:       Zero-based page index
            size:       Page size (>= 1)
            sort_field: API field name to sort by, e.g. "createdAt"
            direction:  "ASC" or "DESC", any case
            statuses:   Keep only orders in one of these states (None/empty = all)
            search:     Free-text filter (None/blank = no filter)

        Raises:
            ValidationError: sort_field or direction is not supported
        """
        ...
