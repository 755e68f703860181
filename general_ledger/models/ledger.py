"""
Ledger model (leaf account of the chart of accounts).

Every posting targets a ledger. The ledger stores its opening
balance, never a running balance: balances are derived from
the opening balance plus the vouchers in the requested window.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from general_ledger.models.base import Base
from general_ledger.models.types import Money
from general_ledger.models.enums import (
    Nature,
    DrCr,
    LedgerType,
    LedgerStatus,
)


class CoaLedger(Base):
    """
    A postable account.

    Once referenced by a voucher a ledger is never deleted,
    only deactivated via status=INACTIVE.
    """

    __tablename__ = "coa_ledgers"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(
        String(150), nullable=False, index=True
    )
    group_id: Mapped[str] = mapped_column(
        ForeignKey("coa_groups.id"), nullable=False, index=True
    )
    nature: Mapped[Nature] = mapped_column(
        SAEnum(Nature, name="nature_enum"),
        nullable=False,
    )
    ledger_type: Mapped[LedgerType] = mapped_column(
        SAEnum(LedgerType, name="ledger_type_enum"),
        nullable=False,
        default=LedgerType.OTHER,
    )
    opening_amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    opening_dr_cr: Mapped[DrCr] = mapped_column(
        SAEnum(DrCr, name="dr_cr_enum"),
        nullable=False,
        default=DrCr.DR,
    )
    opening_as_of: Mapped[date | None] = mapped_column(
        Date, nullable=True
    )
    is_posting: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    status: Mapped[LedgerStatus] = mapped_column(
        SAEnum(LedgerStatus, name="ledger_status_enum"),
        nullable=False,
        default=LedgerStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    group: Mapped["CoaGroup"] = relationship(back_populates="ledgers")

    @property
    def signed_opening(self) -> Decimal:
        """Opening balance under the debit-positive convention."""
        amount = Decimal(self.opening_amount or 0)
        return amount if self.opening_dr_cr == DrCr.DR else -amount

    @property
    def is_active(self) -> bool:
        return self.status == LedgerStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<CoaLedger {self.id} {self.name} ({self.nature.value})>"
