"""
Cost of goods sold.

Two ways to get COGS for a period:

1. Order bridge: sum quantity x unit cost over the delivered
   orders of the order subsystem. Cost never reaches the journal
   on this path, so the result depends on the order system's cost
   snapshot.
2. Ledger: post a COGS voucher at delivery (post_delivery_cogs),
   after which COGS is just the balance of the cost-of-goods-sold
   group and the journal stays the single source of truth.
"""

import datetime as dt
import logging
from decimal import Decimal
from typing import Protocol

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError
from general_ledger.models.enums import GroupRole, LedgerType, VoucherType
from general_ledger.models.voucher import Voucher
from general_ledger.schemas.voucher import VoucherCreate, Dr, Cr
from general_ledger.services.chart_service import ChartService
from general_ledger.services.journal_service import JournalService

logger = logging.getLogger(__name__)


class OrderLine(BaseModel):
    product_id: str
    quantity: Decimal = Field(gt=0)


class DeliveredOrder(BaseModel):
    order_id: str
    date: dt.date
    items: list[OrderLine]


class OrderSource(Protocol):
    """What the ledger needs from the order/inventory subsystem."""

    def list_delivered_orders(
        self, from_date: dt.date | None, to_date: dt.date | None
    ) -> list[DeliveredOrder]:
        ...

    def unit_cost(self, product_id: str) -> Decimal:
        ...


class InMemoryOrderSource:
    """OrderSource over plain lists, for callers without an order service."""

    def __init__(self, orders: list[DeliveredOrder], unit_costs: dict[str, Decimal]):
        self.orders = orders
        self.unit_costs = unit_costs

    def list_delivered_orders(self, from_date, to_date):
        return [
            order for order in self.orders
            if (from_date is None or order.date >= from_date)
            and (to_date is None or order.date <= to_date)
        ]

    def unit_cost(self, product_id: str) -> Decimal:
        # Unknown products cost nothing, as in the order screens.
        return Decimal(self.unit_costs.get(product_id, 0))


def order_cost(order: DeliveredOrder, source: OrderSource) -> Decimal:
    return sum(
        (line.quantity * source.unit_cost(line.product_id) for line in order.items),
        Decimal("0"),
    )


def compute_cogs(
    source: OrderSource,
    from_date: dt.date | None = None,
    to_date: dt.date | None = None,
) -> Decimal:
    """COGS from delivered orders dated within the window (inclusive)."""
    return sum(
        (order_cost(order, source)
         for order in source.list_delivered_orders(from_date, to_date)),
        Decimal("0"),
    )


class CogsPoster:
    """
    Posts COGS into the journal when an order is delivered.

    Debits a cost-of-goods-sold ledger and credits an inventory
    ledger. Without explicit ids, the first EXPENSE ledger of the
    COGS group and the first INVENTORY ledger of the inventory
    group are used.
    """

    def __init__(
        self,
        db: Session,
        cogs_ledger_id: str | None = None,
        inventory_ledger_id: str | None = None,
    ):
        self.db = db
        self.chart = ChartService(db)
        self.journal = JournalService(db)
        self.cogs_ledger_id = cogs_ledger_id
        self.inventory_ledger_id = inventory_ledger_id

    def _ledger_in_role(self, role: GroupRole, ledger_type: LedgerType) -> str:
        group = self.chart.canonical_group(role)
        for ledger in self.chart.ledgers_of(group.id):
            if ledger.ledger_type == ledger_type:
                return ledger.id
        raise NotFoundError(
            f"No {ledger_type.value} ledger in the {role.value} group"
        )

    def post_delivery_cogs(
        self, order: DeliveredOrder, source: OrderSource
    ) -> Voucher | None:
        """Post the cost of a delivered order; None when it costs nothing."""
        cost = order_cost(order, source)
        if cost <= 0:
            logger.info("Order %s has no cost to post", order.order_id)
            return None

        cogs_id = self.cogs_ledger_id or self._ledger_in_role(
            GroupRole.COST_OF_GOODS_SOLD, LedgerType.EXPENSE
        )
        stock_id = self.inventory_ledger_id or self._ledger_in_role(
            GroupRole.INVENTORY, LedgerType.INVENTORY
        )

        return self.journal.append(VoucherCreate(
            date=order.date,
            narration=f"Cost of goods delivered, order {order.order_id}",
            voucher_type=VoucherType.JOURNAL,
            entries=[Dr(cogs_id, cost), Cr(stock_id, cost)],
        ))
