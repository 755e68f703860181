"""
Journal service: the only writer of vouchers.

This service enforces the fundamental rules:
1. Every voucher must balance (debits = credits) with a non-zero total
2. Every line targets an existing, active, posting ledger
3. Nothing dated inside the locked books is posted, edited or deleted

Validation runs before anything is added to the session, so a
rejected voucher leaves no trace. The caller owns the database
transaction: append/replace/delete only flush, and the caller
commits (or rolls back) so validate-then-write is one unit.
"""

import datetime as dt
import logging
from collections.abc import Iterator

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from general_ledger.exceptions import (
    ClosedPeriodError,
    InvalidVoucherError,
    NotFoundError,
    UnbalancedVoucherError,
    UnknownAccountError,
)
from general_ledger.models.book_lock import BookLock
from general_ledger.models.ledger import CoaLedger
from general_ledger.models.voucher import Voucher, VoucherEntry
from general_ledger.schemas.voucher import VoucherCreate

logger = logging.getLogger(__name__)

# Vouchers loaded per round trip while streaming the journal.
STREAM_BATCH_SIZE = 500


class JournalService:
    """
    Append-only journal of vouchers, plus the controlled edit
    and delete operations an authorised actor may perform.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(self, request: VoucherCreate) -> Voucher:
        """
        Validate and stage a new voucher.

        Raises UnbalancedVoucherError (with both totals),
        UnknownAccountError, InvalidVoucherError or
        ClosedPeriodError; on any of them nothing is written.
        """
        self._validate(request)

        voucher = Voucher(
            date=request.date,
            narration=request.narration.strip(),
            voucher_type=request.voucher_type,
            entries=self._build_entries(request),
        )
        self.db.add(voucher)
        self.db.flush()

        logger.info(
            "Posted voucher %s dated %s for %s",
            voucher.id, voucher.date, request.total_debit,
        )
        return voucher

    def replace(self, voucher_id: int, request: VoucherCreate) -> Voucher:
        """
        Replace the lines, narration and date of a voucher.

        All-or-nothing: the new content is validated in full before
        the old lines are removed. The voucher keeps its id and so
        its place among same-day vouchers.
        """
        voucher = self.get(voucher_id)
        self._check_open_period(voucher.date)
        self._validate(request)

        voucher.entries = self._build_entries(request)
        voucher.date = request.date
        voucher.narration = request.narration.strip()
        voucher.voucher_type = request.voucher_type
        self.db.flush()

        logger.info("Replaced voucher %s", voucher.id)
        return voucher

    def delete(self, voucher_id: int) -> None:
        voucher = self.get(voucher_id)
        self._check_open_period(voucher.date)
        self.db.delete(voucher)
        self.db.flush()
        logger.info("Deleted voucher %s", voucher_id)

    def get(self, voucher_id: int) -> Voucher:
        voucher = self.db.get(Voucher, voucher_id)
        if not voucher:
            raise NotFoundError(f"Voucher {voucher_id} not found")
        return voucher

    def count(self) -> int:
        return self.db.execute(select(func.count(Voucher.id))).scalar_one()

    def list_in_range(
        self,
        from_date: dt.date | None = None,
        to_date: dt.date | None = None,
    ) -> Iterator[Voucher]:
        """
        Stream vouchers dated within [from_date, to_date].

        Both bounds are inclusive; a missing bound is open.
        Ordered by business date, then insertion order, and
        loaded in batches so long histories are not held in
        memory at once.
        """
        stmt = (
            select(Voucher)
            .options(selectinload(Voucher.entries))
            .order_by(Voucher.date, Voucher.id)
        )
        if from_date is not None:
            stmt = stmt.where(Voucher.date >= from_date)
        if to_date is not None:
            stmt = stmt.where(Voucher.date <= to_date)

        result = self.db.execute(
            stmt.execution_options(yield_per=STREAM_BATCH_SIZE)
        )
        yield from result.scalars()

    # --- Book lock ---

    def locked_through(self) -> dt.date | None:
        lock = self.db.execute(select(BookLock).limit(1)).scalar_one_or_none()
        return lock.locked_through if lock else None

    def lock_books(self, through: dt.date | None) -> dt.date | None:
        """
        Close the books up to and including `through`.

        Passing None removes the lock.
        """
        lock = self.db.execute(select(BookLock).limit(1)).scalar_one_or_none()
        if through is None:
            if lock:
                self.db.delete(lock)
        elif lock:
            lock.locked_through = through
        else:
            self.db.add(BookLock(locked_through=through))
        self.db.flush()
        if through is None:
            logger.info("Books unlocked")
        else:
            logger.info("Books locked through %s", through)
        return through

    # --- Validation ---

    def _check_open_period(self, voucher_date: dt.date) -> None:
        locked = self.locked_through()
        if locked is not None and voucher_date <= locked:
            raise ClosedPeriodError(
                f"Books are locked through {locked.isoformat()}; "
                f"voucher dated {voucher_date.isoformat()} cannot change"
            )

    def _validate(self, request: VoucherCreate) -> None:
        if not request.narration.strip():
            raise InvalidVoucherError("Narration is required")

        total_debit = request.total_debit
        total_credit = request.total_credit
        if total_debit != total_credit:
            raise UnbalancedVoucherError(total_debit, total_credit)
        if total_debit <= 0:
            raise InvalidVoucherError("Voucher total must be greater than zero")

        self._check_open_period(request.date)

        account_ids = {entry.account_id for entry in request.entries}
        accounts = self.db.execute(
            select(CoaLedger).where(CoaLedger.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id)
        if missing:
            raise UnknownAccountError(missing)

        for account in accounts_by_id.values():
            if not account.is_active:
                raise InvalidVoucherError(f"Ledger {account.id} is not active")
            if not account.is_posting:
                raise InvalidVoucherError(
                    f"Ledger {account.id} does not accept postings"
                )

    @staticmethod
    def _build_entries(request: VoucherCreate) -> list[VoucherEntry]:
        return [
            VoucherEntry(
                line_no=line_no,
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
            )
            for line_no, line in enumerate(request.entries, start=1)
        ]
