"""
Journal voucher and voucher line models.

A voucher is the atomic unit of financial fact: a set of
lines whose debits equal their credits. The balance rule is
enforced by the JournalService before anything is flushed,
not by the model.
"""

import uuid
import datetime as dt
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, Date, DateTime, ForeignKey,
    Enum as SAEnum, Uuid, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from general_ledger.models.base import Base
from general_ledger.models.enums import VoucherType
from general_ledger.models.types import Money


class Voucher(Base):
    """
    A balanced journal entry.

    The integer id doubles as insertion order: vouchers with the
    same business date are folded in id order, which keeps running
    balances deterministic. Editing a voucher replaces its lines
    but keeps its id.
    """

    __tablename__ = "vouchers"

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    narration: Mapped[str] = mapped_column(String(500), nullable=False)
    voucher_type: Mapped[VoucherType] = mapped_column(
        SAEnum(VoucherType, name="voucher_type_enum"),
        nullable=False,
        default=VoucherType.JOURNAL,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    entries: Mapped[list["VoucherEntry"]] = relationship(
        back_populates="voucher",
        cascade="all, delete-orphan",
        order_by="VoucherEntry.line_no",
    )

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.entries), Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Voucher {self.id} {self.date.isoformat()} "
            f"{self.voucher_type.value} {self.total_debit}>"
        )


class VoucherEntry(Base):
    """One debit or credit line of a voucher."""

    __tablename__ = "voucher_entries"
    __table_args__ = (
        CheckConstraint(
            "CAST(debit AS NUMERIC) >= 0 AND CAST(credit AS NUMERIC) >= 0",
            name="ck_entry_non_negative",
        ),
        CheckConstraint(
            "(CAST(debit AS NUMERIC) = 0 AND CAST(credit AS NUMERIC) > 0) OR "
            "(CAST(credit AS NUMERIC) = 0 AND CAST(debit AS NUMERIC) > 0)",
            name="ck_entry_one_side",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_id: Mapped[int] = mapped_column(
        ForeignKey("vouchers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    line_no: Mapped[int] = mapped_column(Integer, nullable=False)
    account_id: Mapped[str] = mapped_column(
        ForeignKey("coa_ledgers.id"), nullable=False, index=True
    )
    debit: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )

    voucher: Mapped["Voucher"] = relationship(back_populates="entries")

    @property
    def signed_amount(self) -> Decimal:
        return Decimal(self.debit) - Decimal(self.credit)

    def __repr__(self) -> str:
        side = "DR" if self.debit else "CR"
        return f"<VoucherEntry {side} {self.account_id} {self.debit or self.credit}>"
