"""
Balance engine.

Balances are never stored. They are derived on every request
from the ledgers' opening balances and the vouchers in the
requested window, so a missed update can never make them drift.

Sign convention: debit positive, credit negative, for every
ledger whatever its nature. Presentation layers flip the sign
per nature; the engine never does.

Two modes, kept apart on purpose:
- CUMULATIVE: opening balance + every voucher up to as_of
- MOVEMENT: 0 + vouchers from from_date to as_of (period activity)
"""

import datetime as dt
import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from general_ledger.exceptions import LedgerError
from general_ledger.models.ledger import CoaLedger
from general_ledger.models.voucher import Voucher
from general_ledger.services.chart_service import ChartService
from general_ledger.services.journal_service import JournalService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class BalanceMode(str, enum.Enum):
    CUMULATIVE = "CUMULATIVE"
    MOVEMENT = "MOVEMENT"


@dataclass
class BalanceSnapshot:
    """Signed balance of every ledger for one window."""
    mode: BalanceMode
    as_of: dt.date | None
    from_date: dt.date | None
    balances: dict[str, Decimal]
    # Ledger ids found on voucher lines but missing from the chart,
    # with the number of lines skipped for each.
    unknown_accounts: dict[str, int] = field(default_factory=dict)

    def get(self, ledger_id: str) -> Decimal:
        return self.balances.get(ledger_id, ZERO)


def fold_balances(
    ledgers: Iterable[CoaLedger],
    vouchers: Iterable[Voucher],
    include_opening: bool = True,
) -> tuple[dict[str, Decimal], dict[str, int]]:
    """
    Fold vouchers into per-ledger signed balances.

    Pure: reads its inputs, returns new mappings. Lines on ids
    that are not among `ledgers` are skipped and counted.
    """
    balances = {
        ledger.id: (ledger.signed_opening if include_opening else ZERO)
        for ledger in ledgers
    }
    unknown: dict[str, int] = {}

    for voucher in vouchers:
        for entry in voucher.entries:
            if entry.account_id in balances:
                balances[entry.account_id] += (
                    Decimal(entry.debit) - Decimal(entry.credit)
                )
            else:
                unknown[entry.account_id] = unknown.get(entry.account_id, 0) + 1

    return balances, unknown


class BalanceService:

    def __init__(self, db: Session):
        self.db = db
        self.chart = ChartService(db)
        self.journal = JournalService(db)

    def compute_balances(
        self,
        as_of: dt.date | None = None,
        from_date: dt.date | None = None,
        mode: BalanceMode | None = None,
    ) -> BalanceSnapshot:
        """
        Derive every ledger's signed balance.

        Without from_date the mode is CUMULATIVE (opening balance
        plus all vouchers up to as_of). With from_date it is
        MOVEMENT (vouchers from from_date to as_of, starting at 0).
        Asking for CUMULATIVE with a from_date is rejected: a
        cumulative balance always starts at the beginning of the
        books.
        """
        if mode is None:
            mode = BalanceMode.MOVEMENT if from_date else BalanceMode.CUMULATIVE

        if mode == BalanceMode.CUMULATIVE and from_date is not None:
            raise LedgerError(
                "Cumulative balances start at the beginning of the books; "
                "use MOVEMENT for a from_date window"
            )
        if from_date and as_of and from_date > as_of:
            raise LedgerError(
                f"from_date {from_date} is after as_of {as_of}"
            )

        ledgers = self.chart.all_ledgers()
        vouchers = self.journal.list_in_range(
            from_date if mode == BalanceMode.MOVEMENT else None, as_of
        )
        balances, unknown = fold_balances(
            ledgers,
            vouchers,
            include_opening=(mode == BalanceMode.CUMULATIVE),
        )

        if unknown:
            logger.warning(
                "Skipped voucher lines on unknown ledgers: %s", unknown
            )

        return BalanceSnapshot(
            mode=mode,
            as_of=as_of,
            from_date=from_date,
            balances=balances,
            unknown_accounts=unknown,
        )

    def cumulative(self, as_of: dt.date | None = None) -> BalanceSnapshot:
        return self.compute_balances(as_of=as_of, mode=BalanceMode.CUMULATIVE)

    def movement(
        self, from_date: dt.date, to_date: dt.date | None = None
    ) -> BalanceSnapshot:
        return self.compute_balances(
            as_of=to_date, from_date=from_date, mode=BalanceMode.MOVEMENT
        )

    def period_opening(self, from_date: dt.date) -> BalanceSnapshot:
        """Cumulative balances at the close of the day before from_date."""
        return self.cumulative(as_of=from_date - dt.timedelta(days=1))

    def turnover(
        self, from_date: dt.date | None, to_date: dt.date | None = None
    ) -> dict[str, tuple[Decimal, Decimal]]:
        """Total (debits, credits) per ledger for vouchers in the window."""
        totals: dict[str, tuple[Decimal, Decimal]] = {}
        for voucher in self.journal.list_in_range(from_date, to_date):
            for entry in voucher.entries:
                debit, credit = totals.get(entry.account_id, (ZERO, ZERO))
                totals[entry.account_id] = (
                    debit + Decimal(entry.debit),
                    credit + Decimal(entry.credit),
                )
        return totals
