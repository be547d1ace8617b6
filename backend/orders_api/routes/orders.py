"""
Orders API — Order Route Handlers
==================================

What:  The /api/v1/orders resource: create, fetch, replace, list.
Why:   HTTP concerns (status codes, headers, logs) stay out of the service.
How:   Pydantic validates bodies and query parameters before a handler runs;
       the handler calls the injected OrderService and picks the status code.
       The collection routes also answer on a trailing slash so clients are
       not redirected.
Who:   Mounted by main.create_app().
When:  Per request; the handlers hold no state between calls.

Status mapping:
    POST   created             → 201 + order
    GET    found / missing     → 200 + order / 404, empty body
    PUT    updated / missing   → 200 + order / 404, empty body
    GET /  always              → 200 + page (X-Total-Count header)
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status

from orders_api.config import settings
from orders_api.schemas.order import (
    ErrorResponse,
    OrderIncoming,
    OrderPage,
    OrderResponse,
)
from orders_api.services.order_base import OrderService
from orders_api.services.order_service import get_order_service

logger = logging.getLogger(__name__)

NEW_ORDER_LOG = "New order was created id:%s"
ORDER_UPDATED_LOG = "Order:%s was updated"

router = APIRouter(prefix="/api/v1/orders", tags=["Orders"])


def _not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderResponse,
    responses={
        201: {"description": "Order is created", "model": OrderResponse},
        422: {"description": "Payload failed validation"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a new order",
)
@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderResponse,
    include_in_schema=False,
)
async def create_order(
    incoming: OrderIncoming,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    created = await service.create_order(incoming)
    logger.info(NEW_ORDER_LOG, created.id)
    return created


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={
        200: {"description": "Found the order", "model": OrderResponse},
        404: {"description": "Order not found"},
    },
    summary="Get an order by its id",
)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> Union[OrderResponse, Response]:
    order = await service.get_order(order_id)
    if order is None:
        return _not_found()
    return order


@router.put(
    "/{order_id}",
    response_model=OrderResponse,
    responses={
        200: {"description": "Order was updated", "model": OrderResponse},
        404: {"description": "Order not found"},
        422: {"description": "Payload failed validation"},
    },
    summary="Update an order by its id",
)
async def update_order(
    order_id: int,
    incoming: OrderIncoming,
    service: OrderService = Depends(get_order_service),
) -> Union[OrderResponse, Response]:
    updated = await service.update_order(order_id, incoming)
    if updated is None:
        return _not_found()
    logger.info(ORDER_UPDATED_LOG, updated.id)
    return updated


@router.get(
    "",
    response_model=OrderPage,
    responses={
        200: {"description": "A page of orders", "model": OrderPage},
        400: {"description": "Unsupported sort field or direction", "model": ErrorResponse},
    },
    summary="List orders, sorted and filtered by the query parameters",
)
@router.get("/", response_model=OrderPage, include_in_schema=False)
async def list_orders(
    response: Response,
    page: int = Query(
        default=0,
        ge=0,
        le=settings.max_page_index,
        description="Zero-based page index",
    ),
    size: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Orders per page",
    ),
    sort_field: str = Query(default="createdAt", alias="sortField"),
    direction: str = Query(default="DESC", description="ASC or DESC"),
    statuses: Optional[List[str]] = Query(
        default=None,
        alias="status",
        description="Repeatable status filter, e.g. ?status=NEW&status=SHIPPED",
    ),
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive text matched against customer, email, address and description",
    ),
    service: OrderService = Depends(get_order_service),
) -> OrderPage:
    """Parameters are handed to the service exactly as received."""
    result = await service.get_orders(page, size, sort_field, direction, statuses, search)
    response.headers["X-Total-Count"] = str(result.total_elements)
    return result
