"""
Orders API — Application Package
==================================

What: The orders REST service (create, fetch, update and list orders).
Who:  Imported by uvicorn (`orders_api.main:app`), Alembic and the test suite.

Layering:

    ┌─────────────────────────────────────┐
    │   routes/      HTTP surface         │  status codes, headers, logging
    ├─────────────────────────────────────┤
    │   services/    OrderService         │  filtering, sorting, paging
    ├─────────────────────────────────────┤
    │   schemas/ + models/                │  pydantic DTOs + SQLAlchemy table
    ├─────────────────────────────────────┤
    │   database.py  async sessions       │
    └─────────────────────────────────────┘

Routes only ever talk to the abstract OrderService, so the SQL implementation
can be swapped for an in-memory one in tests.
"""

__version__ = "1.0.0"
