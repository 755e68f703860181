"""
Column types shared by the ledger models.
"""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.types import TypeDecorator

MONEY_PRECISION = 19
MONEY_SCALE = 4
MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)


class Money(TypeDecorator):
    """
    Exact fixed-point money column: NUMERIC(19, 4).

    SQLite has no decimal storage and would keep NUMERIC values as
    REAL, so there the amount is written as its canonical decimal
    string and parsed back into a Decimal on load. Other dialects
    use a native NUMERIC column.
    """

    impl = Numeric(MONEY_PRECISION, MONEY_SCALE, asdecimal=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(32))
        return dialect.type_descriptor(
            Numeric(MONEY_PRECISION, MONEY_SCALE, asdecimal=True)
        )

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = Decimal(value).quantize(MONEY_QUANTUM)
        if dialect.name == "sqlite":
            return format(amount, "f")
        return amount

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
