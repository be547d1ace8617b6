"""
Orders API — Order Service Tests
=================================

What:  SqlOrderService behaviour.
How:   Argument validation and error wrapping are checked against a mocked
       AsyncSession; filtering, sorting and paging run against a real
       SQLite database (aiosqlite) built per test.
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from orders_api.config import settings
from orders_api.exceptions import DatabaseError, ValidationError
from orders_api.models.order import OrderStatus
from orders_api.schemas.order import OrderIncoming
from orders_api.services.order_service import SqlOrderService, normalize_statuses


def make_incoming(**overrides) -> OrderIncoming:
    data = {
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
        "shipping_address": "12 Analytical Row, London",
        "total_amount": Decimal("10.00"),
    }
    data.update(overrides)
    return OrderIncoming(**data)


class TestNormalizeStatuses:

    def test_none_and_empty(self):
        assert normalize_statuses(None) == []
        assert normalize_statuses([]) == []
        assert normalize_statuses(["", " "]) == []

    def test_splits_and_uppercases(self):
        assert normalize_statuses(["new,Shipped", "NEW", " delivered "]) == [
            "NEW",
            "SHIPPED",
            "DELIVERED",
        ]


class TestServiceWithMockSession:
    """Paths that never need real rows."""

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, mock_db_session):
        mock_db_session.get.return_value = None
        service = SqlOrderService(mock_db_session)

        assert await service.get_order(42) is None

    @pytest.mark.asyncio
    async def test_update_missing_returns_none_without_flush(self, mock_db_session):
        mock_db_session.get.return_value = None
        service = SqlOrderService(mock_db_session)

        assert await service.update_order(42, make_incoming()) is None
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_sort_field_raises_before_query(self, mock_db_session):
        service = SqlOrderService(mock_db_session)

        with pytest.raises(ValidationError) as exc_info:
            await service.get_orders(0, 20, "price", "DESC")

        assert exc_info.value.field == "sortField"
        assert "createdAt" in exc_info.value.context["allowed"]
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_direction_raises(self, mock_db_session):
        service = SqlOrderService(mock_db_session)

        with pytest.raises(ValidationError, match="Invalid direction"):
            await service.get_orders(0, 20, "createdAt", "SIDEWAYS")

    @pytest.mark.asyncio
    async def test_empty_result_page(self, mock_db_session):
        count_result = MagicMock()
        count_result.scalar_one.return_value = 0
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []
        mock_db_session.execute = AsyncMock(side_effect=[count_result, rows_result])

        page = await SqlOrderService(mock_db_session).get_orders(0, 20, "createdAt", "desc")

        assert page.content == []
        assert page.total_elements == 0
        assert page.total_pages == 0
        assert page.first is True
        assert page.last is True

    @pytest.mark.asyncio
    async def test_sqlalchemy_errors_become_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )

        with pytest.raises(DatabaseError):
            await SqlOrderService(mock_db_session).get_orders(0, 20, "createdAt", "DESC")

    @pytest.mark.asyncio
    async def test_get_error_becomes_database_error(self, mock_db_session):
        mock_db_session.get.side_effect = OperationalError("SELECT", {}, Exception("boom"))

        with pytest.raises(DatabaseError) as exc_info:
            await SqlOrderService(mock_db_session).get_order(7)

        assert exc_info.value.context == {"order_id": 7}


class TestServiceWithSqlite:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, db_session):
        service = SqlOrderService(db_session)

        created = await service.create_order(make_incoming(currency="eur"))

        assert created.id >= 1
        assert created.currency == "EUR"
        assert created.status is OrderStatus.NEW
        assert created.created_at is not None
        assert created.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_returns_stored_order(self, db_session):
        service = SqlOrderService(db_session)
        created = await service.create_order(make_incoming(description="fragile"))

        fetched = await service.get_order(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.description == "fragile"
        assert fetched.total_amount == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_timestamps_read_back_as_utc(self, db_session):
        service = SqlOrderService(db_session)
        created = await service.create_order(make_incoming())
        # force the next lookup to load the row from SQLite
        db_session.expire_all()

        fetched = await service.get_order(created.id)

        assert fetched.created_at.tzinfo is not None
        assert fetched.created_at.utcoffset() == timedelta(0)
        assert fetched == created

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, db_session):
        service = SqlOrderService(db_session)
        created = await service.create_order(
            make_incoming(description="first", status=OrderStatus.PROCESSING)
        )

        updated = await service.update_order(
            created.id,
            make_incoming(customer_name="Grace Hopper", total_amount=Decimal("25.50")),
        )

        assert updated is not None
        assert updated.customer_name == "Grace Hopper"
        assert updated.total_amount == Decimal("25.50")
        # full replace: omitted optional fields fall back to their defaults
        assert updated.description is None
        assert updated.status is OrderStatus.NEW
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_none(self, db_session):
        assert await SqlOrderService(db_session).update_order(999, make_incoming()) is None

    @pytest.mark.asyncio
    async def test_paging_and_totals(self, db_session):
        service = SqlOrderService(db_session)
        for i in range(5):
            await service.create_order(make_incoming(customer_name=f"Customer {i}"))

        first = await service.get_orders(0, 2, "id", "ASC")
        last = await service.get_orders(2, 2, "id", "ASC")
        beyond = await service.get_orders(10, 2, "id", "ASC")

        assert [o.customer_name for o in first.content] == ["Customer 0", "Customer 1"]
        assert first.total_elements == 5
        assert first.total_pages == 3
        assert first.first is True and first.last is False
        assert [o.customer_name for o in last.content] == ["Customer 4"]
        assert last.last is True
        assert beyond.content == []
        assert beyond.total_elements == 5

    @pytest.mark.asyncio
    async def test_largest_page_index_is_queryable(self, db_session):
        service = SqlOrderService(db_session)
        await service.create_order(make_incoming())

        result = await service.get_orders(
            settings.max_page_index, settings.max_page_size, "id", "ASC"
        )

        assert result.content == []
        assert result.total_elements == 1
        assert result.last is True

    @pytest.mark.asyncio
    async def test_sort_direction_and_tie_break(self, db_session):
        service = SqlOrderService(db_session)
        a = await service.create_order(make_incoming(total_amount=Decimal("5.00")))
        b = await service.create_order(make_incoming(total_amount=Decimal("5.00")))
        c = await service.create_order(make_incoming(total_amount=Decimal("1.00")))

        desc = await service.get_orders(0, 10, "totalAmount", "desc")
        asc = await service.get_orders(0, 10, "total_amount", "ASC")

        assert [o.id for o in desc.content] == [b.id, a.id, c.id]
        assert [o.id for o in asc.content] == [c.id, a.id, b.id]

    @pytest.mark.asyncio
    async def test_status_filter(self, db_session):
        service = SqlOrderService(db_session)
        await service.create_order(make_incoming(status=OrderStatus.NEW))
        shipped = await service.create_order(make_incoming(status=OrderStatus.SHIPPED))
        delivered = await service.create_order(make_incoming(status=OrderStatus.DELIVERED))

        page = await service.get_orders(0, 20, "id", "ASC", ["shipped,DELIVERED"])
        nothing = await service.get_orders(0, 20, "id", "ASC", ["LOST"])

        assert [o.id for o in page.content] == [shipped.id, delivered.id]
        assert page.total_elements == 2
        assert nothing.content == []
        assert nothing.total_elements == 0

    @pytest.mark.asyncio
    async def test_search_matches_any_text_field(self, db_session):
        service = SqlOrderService(db_session)
        by_name = await service.create_order(make_incoming(customer_name="Ada Lovelace"))
        by_email = await service.create_order(
            make_incoming(customer_name="Grace", customer_email="LOVELACE.fan@example.com")
        )
        by_description = await service.create_order(
            make_incoming(customer_name="Edsger", description="Signed lovelace notes")
        )
        await service.create_order(make_incoming(customer_name="Barbara"))

        page = await service.get_orders(0, 20, "id", "ASC", None, "  lovelace ")

        assert [o.id for o in page.content] == [by_name.id, by_email.id, by_description.id]

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, db_session):
        service = SqlOrderService(db_session)
        await service.create_order(make_incoming(description="plain"))
        discounted = await service.create_order(make_incoming(description="50% off"))

        page = await service.get_orders(0, 20, "id", "ASC", None, "%")

        assert [o.id for o in page.content] == [discounted.id]

    @pytest.mark.asyncio
    async def test_identical_queries_return_identical_pages(self, db_session):
        service = SqlOrderService(db_session)
        for name in ("b", "a", "c", "a"):
            await service.create_order(make_incoming(customer_name=name))

        first = await service.get_orders(0, 3, "customerName", "ASC", ["NEW"], "")
        second = await service.get_orders(0, 3, "customerName", "ASC", ["NEW"], "")

        assert first == second
