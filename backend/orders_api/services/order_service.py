"""
Orders API — SQL Order Service
===============================

What:  OrderService backed by async SQLAlchemy.
Why:   Query building, sort whitelisting and SQL error wrapping live here so
       the router only maps results to status codes.
How:   Writes flush inside the request's session and leave the commit to
       get_db_session(); reads build one COUNT and one page query.
Who:   Built per request by get_order_service() and injected into the router.
When:  Once per /api/v1/orders request, bound to that request's session.

List semantics (GET /api/v1/orders):
    statuses  status IN (...), case-insensitive; comma-separated values are
              split, so ?status=NEW,SHIPPED and ?status=NEW&status=SHIPPED
              are equivalent
    search    case-insensitive substring over customer name, email, shipping
              address and description
    sort      whitelisted columns only, ties broken by id in the same
              direction so repeated calls return identical pages
    paging    offset = page * size; pages past the end are empty but still
              report the real totals

Update semantics (PUT): full replace of every field in OrderIncoming.
"""

import logging
from typing import Dict, List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from orders_api.database import get_db_session
from orders_api.exceptions import DatabaseError, ValidationError
from orders_api.models.order import Order, utcnow
from orders_api.schemas.order import OrderIncoming, OrderPage, OrderResponse
from orders_api.services.order_base import OrderService

logger = logging.getLogger(__name__)


# API field name → column. snake_case spellings are added below.
SORTABLE_FIELDS: Dict[str, InstrumentedAttribute] = {
    "id": Order.id,
    "createdAt": Order.created_at,
    "updatedAt": Order.updated_at,
    "customerName": Order.customer_name,
    "customerEmail": Order.customer_email,
    "totalAmount": Order.total_amount,
    "status": Order.status,
}
_SORT_ALIASES: Dict[str, InstrumentedAttribute] = {
    **SORTABLE_FIELDS,
    "created_at": Order.created_at,
    "updated_at": Order.updated_at,
    "customer_name": Order.customer_name,
    "customer_email": Order.customer_email,
    "total_amount": Order.total_amount,
}

DIRECTIONS = ("ASC", "DESC")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def normalize_statuses(statuses: Optional[Sequence[str]]) -> List[str]:
    """Split comma-joined values, upper-case, drop blanks and duplicates."""
    seen: List[str] = []
    for raw in statuses or []:
        for part in raw.split(","):
            value = part.strip().upper()
            if value and value not in seen:
                seen.append(value)
    return seen


class SqlOrderService(OrderService):
    """
    Order operations against a single AsyncSession.

    The session belongs to the request: this class only flushes, and
    get_db_session() decides whether to commit or roll back.
    """

    def __init__(self, db: AsyncSession):
        self._db = db

    @staticmethod
    def _apply(order: Order, incoming: OrderIncoming) -> None:
        order.customer_name = incoming.customer_name
        order.customer_email = incoming.customer_email
        order.shipping_address = incoming.shipping_address
        order.description = incoming.description
        order.total_amount = incoming.total_amount
        order.currency = incoming.currency
        order.status = incoming.status.value

    async def create_order(self, incoming: OrderIncoming) -> OrderResponse:
        order = Order()
        self._apply(order, incoming)
        try:
            self._db.add(order)
            # flush assigns the primary key without ending the transaction
            await self._db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating order: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the order. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.debug("Inserted order row %s", order.id)
        return OrderResponse.model_validate(order)

    async def get_order(self, order_id: int) -> Optional[OrderResponse]:
        try:
            order = await self._db.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching order %s: %s", order_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the order. Please try again.",
                context={"order_id": order_id},
            )
        if order is None:
            return None
        return OrderResponse.model_validate(order)

    async def update_order(
        self, order_id: int, incoming: OrderIncoming
    ) -> Optional[OrderResponse]:
        try:
            order = await self._db.get(Order, order_id)
            if order is None:
                return None
            self._apply(order, incoming)
            order.updated_at = utcnow()
            await self._db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating order %s: %s", order_id, str(e))
            raise DatabaseError(
                message="Could not update the order. Please try again.",
                context={"order_id": order_id},
            )
        return OrderResponse.model_validate(order)

    async def get_orders(
        self,
        page: int,
        size: int,
        sort_field: str,
        direction: str,
        statuses: Optional[Sequence[str]] = None,
        search: Optional[str] = None,
    ) -> OrderPage:
        column = _SORT_ALIASES.get(sort_field)
        if column is None:
            raise ValidationError(
                message=f"Cannot sort by '{sort_field}'",
                field="sortField",
                context={"allowed": sorted(SORTABLE_FIELDS)},
            )
        normalized_direction = (direction or "").strip().upper()
        if normalized_direction not in DIRECTIONS:
            raise ValidationError(
                message=f"Invalid direction '{direction}'. Must be ASC or DESC",
                field="direction",
                context={"allowed": list(DIRECTIONS)},
            )

        # ── Filters ───────────────────────────────────────────────────────
        filters = []
        wanted = normalize_statuses(statuses)
        if wanted:
            filters.append(Order.status.in_(wanted))

        term = (search or "").strip()
        if term:
            pattern = f"%{_escape_like(term.lower())}%"
            filters.append(
                or_(
                    func.lower(Order.customer_name).like(pattern, escape="\\"),
                    func.lower(Order.customer_email).like(pattern, escape="\\"),
                    func.lower(Order.shipping_address).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Order.description, "")).like(pattern, escape="\\"),
                )
            )

        # ── Ordering ──────────────────────────────────────────────────────
        if normalized_direction == "ASC":
            ordering = [column.asc(), Order.id.asc()]
        else:
            ordering = [column.desc(), Order.id.desc()]

        count_query = select(func.count()).select_from(Order)
        query = select(Order)
        if filters:
            count_query = count_query.where(*filters)
            query = query.where(*filters)
        query = query.order_by(*ordering).offset(page * size).limit(size)

        try:
            count_result = await self._db.execute(count_query)
            total = count_result.scalar_one()

            result = await self._db.execute(query)
            orders = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing orders: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve orders. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.debug(
            "Listed %d/%d orders (page=%d size=%d sort=%s %s statuses=%s search=%r)",
            len(orders), total, page, size, sort_field, normalized_direction, wanted, term,
        )
        return OrderPage.build(
            content=[OrderResponse.model_validate(o) for o in orders],
            page=page,
            size=size,
            total=total,
        )


# ── Dependency ────────────────────────────────────────────────────────────
def get_order_service(db: AsyncSession = Depends(get_db_session)) -> OrderService:
    """FastAPI dependency: an OrderService bound to this request's session."""
    return SqlOrderService(db)
