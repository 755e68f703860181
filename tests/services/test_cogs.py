"""
Tests for cost of goods sold: the order bridge and
posting COGS vouchers at delivery.
"""

import datetime as dt
from decimal import Decimal

import pytest

from general_ledger.exceptions import NotFoundError
from general_ledger.services.balance_service import BalanceService
from general_ledger.services.cogs import (
    CogsPoster,
    DeliveredOrder,
    InMemoryOrderSource,
    OrderLine,
    compute_cogs,
    order_cost,
)
from general_ledger.services.report_service import ReportService


def order(order_id, date, *items):
    return DeliveredOrder(
        order_id=order_id,
        date=date,
        items=[OrderLine(product_id=p, quantity=Decimal(q)) for p, q in items],
    )


@pytest.fixture
def source():
    return InMemoryOrderSource(
        orders=[
            order("SO-1", dt.date(2024, 4, 3), ("BOLT", "10"), ("NUT", "20")),
            order("SO-2", dt.date(2024, 4, 30), ("BOLT", "1")),
            order("SO-3", dt.date(2024, 5, 1), ("BOLT", "100")),
        ],
        unit_costs={"BOLT": Decimal("2.50"), "NUT": Decimal("0.40")},
    )


class TestOrderBridge:

    def test_order_cost(self, source):
        assert order_cost(source.orders[0], source) == Decimal("33.00")

    def test_window_is_inclusive(self, source):
        cogs = compute_cogs(source, dt.date(2024, 4, 1), dt.date(2024, 4, 30))

        assert cogs == Decimal("35.50")

    def test_open_window(self, source):
        assert compute_cogs(source) == Decimal("285.50")

    def test_unknown_product_costs_nothing(self, source):
        lonely = order("SO-9", dt.date(2024, 4, 3), ("GADGET", "5"))

        assert order_cost(lonely, source) == Decimal("0")


class TestPostDeliveryCogs:

    def test_posts_cogs_against_inventory(self, seeded, source):
        voucher = CogsPoster(seeded).post_delivery_cogs(source.orders[0], source)
        seeded.commit()

        lines = {e.account_id: e for e in voucher.entries}
        assert lines["L-5-1"].debit == Decimal("33.00")
        assert lines["L-1.1.3-1"].credit == Decimal("33.00")
        assert "SO-1" in voucher.narration

    def test_ledger_path_reflects_posted_cogs(self, seeded, source):
        poster = CogsPoster(seeded)
        for delivered in source.list_delivered_orders(None, dt.date(2024, 4, 30)):
            poster.post_delivery_cogs(delivered, source)
        seeded.commit()

        report = ReportService(seeded).profit_and_loss(to_date=dt.date(2024, 4, 30))

        assert report.cogs == compute_cogs(source, None, dt.date(2024, 4, 30))
        assert BalanceService(seeded).cumulative().get("L-1.1.3-1") == Decimal("-35.50")

    def test_zero_cost_order_posts_nothing(self, seeded, source):
        free = order("SO-9", dt.date(2024, 4, 3), ("GADGET", "5"))

        assert CogsPoster(seeded).post_delivery_cogs(free, source) is None

    def test_needs_cogs_group(self, db_session, source):
        with pytest.raises(NotFoundError):
            CogsPoster(db_session).post_delivery_cogs(source.orders[0], source)

    def test_explicit_ledgers(self, seeded, source):
        voucher = CogsPoster(
            seeded, cogs_ledger_id="L-5-3", inventory_ledger_id="L-1.1.3-2"
        ).post_delivery_cogs(source.orders[1], source)

        assert {e.account_id for e in voucher.entries} == {"L-5-3", "L-1.1.3-2"}
