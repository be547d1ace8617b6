# Schemas package init
"""
Orders API — API Schemas
=========================

Pydantic models describing request bodies and response payloads. These are
deliberately separate from the SQLAlchemy models in orders_api.models: the
wire format (camelCase, Decimal-as-string) evolves independently of the table.
"""
