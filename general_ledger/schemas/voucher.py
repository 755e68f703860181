"""
Pydantic schemas for journal vouchers.

A voucher line is a tagged variant: either a Debit or a Credit,
each carrying a single positive amount. "Exactly one side per
line" therefore holds by construction; the remaining rule
(debits equal credits) is checked by the JournalService so the
caller gets both totals back.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from general_ledger.models.enums import VoucherType


# --- Request Schemas ---

class DebitLine(BaseModel):
    side: Literal["DR"] = "DR"
    account_id: str = Field(min_length=1, max_length=50)
    amount: Decimal = Field(gt=0, max_digits=19, decimal_places=4)

    @property
    def debit(self) -> Decimal:
        return self.amount

    @property
    def credit(self) -> Decimal:
        return Decimal("0")


class CreditLine(BaseModel):
    side: Literal["CR"] = "CR"
    account_id: str = Field(min_length=1, max_length=50)
    amount: Decimal = Field(gt=0, max_digits=19, decimal_places=4)

    @property
    def debit(self) -> Decimal:
        return Decimal("0")

    @property
    def credit(self) -> Decimal:
        return self.amount


EntryLine = Annotated[Union[DebitLine, CreditLine], Field(discriminator="side")]


def Dr(account_id: str, amount) -> DebitLine:
    """Shorthand for a debit line."""
    return DebitLine(account_id=account_id, amount=Decimal(str(amount)))


def Cr(account_id: str, amount) -> CreditLine:
    """Shorthand for a credit line."""
    return CreditLine(account_id=account_id, amount=Decimal(str(amount)))


class VoucherCreate(BaseModel):
    """
    A complete voucher: lines that must balance.

    Used both to post a new voucher and to replace the
    content of an existing one.
    """
    date: dt.date
    narration: str = Field(min_length=1, max_length=500)
    voucher_type: VoucherType = VoucherType.JOURNAL
    entries: list[EntryLine] = Field(min_length=1)

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.entries), Decimal("0"))


class BookLockRequest(BaseModel):
    """A null `locked_through` reopens the books."""

    locked_through: dt.date | None = None


# --- Response Schemas ---

class VoucherEntryResponse(BaseModel):
    line_no: int
    account_id: str
    debit: Decimal
    credit: Decimal

    model_config = {"from_attributes": True}


class VoucherResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    date: dt.date
    narration: str
    voucher_type: VoucherType
    entries: list[VoucherEntryResponse]
    total_debit: Decimal
    total_credit: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class BookLockResponse(BaseModel):
    locked_through: dt.date | None
