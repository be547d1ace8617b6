"""
Orders API — Pydantic Request/Response Schemas
===============================================

What:  The API contract: what clients send, what they get back.
Why:   Wire names, validation limits and timestamp normalization are fixed
       here, independent of the ORM columns.
How:   FastAPI validates request bodies against these models (422 on shape
       errors) and serializes responses through them.
Who:   The orders router (bodies and OpenAPI error docs) and SqlOrderService
       (ORM row → OrderResponse).
When:  On every request body and every response.

JSON keys are camelCase (`customerName`, `totalAmount`, `createdAt`); the
Python attributes stay snake_case. Inbound payloads may use either spelling.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from orders_api.models.order import OrderStatus


class CamelModel(BaseModel):
    """Base for every API model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class OrderIncoming(CamelModel):
    """
    Payload for POST /api/v1/orders and PUT /api/v1/orders/{orderId}.

    PUT is a full replace, so the same model (and the same defaults) apply to
    both; omitting `status` on update resets it to NEW.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    customer_name: str = Field(min_length=1, max_length=255, examples=["Ada Lovelace"])
    customer_email: str = Field(
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+$",
        examples=["ada@example.com"],
    )
    shipping_address: str = Field(
        min_length=1, max_length=500, examples=["12 Analytical Row, London"]
    )
    description: Optional[str] = Field(default=None, max_length=2000)
    total_amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2, examples=["149.90"])
    currency: str = Field(default="USD", min_length=3, max_length=3, description="ISO 4217 code")
    status: OrderStatus = Field(default=OrderStatus.NEW)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Upper-cases the code and rejects anything that isn't three letters."""
        if not v.isalpha():
            raise ValueError(f"Invalid currency '{v}'. Expected a 3-letter ISO code")
        return v.upper()


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class OrderResponse(CamelModel):
    """A stored order as returned to clients. Built from the ORM row."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: int = Field(description="Database-assigned order id")
    customer_name: str
    customer_email: str
    shipping_address: str
    description: Optional[str] = None
    total_amount: Decimal
    currency: str
    status: OrderStatus
    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: datetime = Field(description="Last modification time (UTC)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """
        Pins timestamps to UTC.

        SQLite hands DateTime(timezone=True) columns back without tzinfo and
        PostgreSQL returns them in the session time zone; both must serialize
        exactly like the value written at creation time ("...Z").
        """
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class OrderPage(CamelModel):
    """
    One page of orders plus the metadata a pager needs.

    `page` is zero-based. `totalPages` is 0 for an empty result, in which
    case the single (empty) page is both `first` and `last`.
    """

    content: List[OrderResponse] = Field(description="Orders on this page")
    page: int = Field(ge=0, description="Zero-based page index")
    size: int = Field(ge=1, description="Requested page size")
    total_elements: int = Field(ge=0, description="Orders matching the filters")
    total_pages: int = Field(ge=0)
    first: bool
    last: bool

    @classmethod
    def build(
        cls, content: List[OrderResponse], page: int, size: int, total: int
    ) -> "OrderPage":
        total_pages = math.ceil(total / size)
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
        )


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Body of every error produced by the global exception handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Cannot sort by 'price'",
            "details": {"field": "sortField", "allowed": ["createdAt", ...]},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the process started")
