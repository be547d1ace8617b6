"""
Orders API — Exception Hierarchy
=================================

What:  Application exceptions that the global handlers in main.py translate
       into JSON error responses.
Why:   Services signal failures by type; the status code and body shape are
       decided in one place instead of in every handler.
Who:   Raised by SqlOrderService; caught by the handlers in main.py.
When:  While a request is processed; never at import or startup.

    OrdersApiError (base)     → 500
    ├── ValidationError       → 400 Bad Request
    └── DatabaseError         → 500 Internal Server Error

A missing order is not an exception: services return None and the router
answers with an empty 404.
"""

from typing import Any, Dict, Optional


class OrdersApiError(Exception):
    """
    Base exception for all Orders API errors.

    Attributes:
        message:  Client-safe description, returned in the response body
        context:  Extra debug data; logged, and only echoed back for 400s
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OrdersApiError):
    """
    Raised when a request is well-formed but asks for something the service
    cannot do, e.g. sorting on an unknown field.

    Shape errors (wrong types, missing body fields) never get this far; FastAPI
    rejects them with 422 first.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(OrdersApiError):
    """
    Raised when a query or write fails unexpectedly.

    The message sent to clients stays generic; the SQL error itself is only
    logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
