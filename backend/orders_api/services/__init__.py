# Services package init
"""
Orders API — Services Layer
============================

What:  Business logic between the HTTP routes and the database.

Service Inventory:
    - OrderService (abstract): contract consumed by routes/orders.py
    - SqlOrderService: async SQLAlchemy implementation
    - get_order_service: FastAPI dependency wiring the two together

Routes never build queries themselves; everything about filtering, sorting
and paging lives here.
"""
