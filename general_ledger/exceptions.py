"""
Ledger error taxonomy.

Every error derives from LedgerError, itself a ValueError, so
callers that treat validation failures as ValueError keep working.
Integrity problems found while reading (trial balance mismatch,
unknown accounts in old vouchers) are not exceptions: reports
carry them as alerts.
"""

from decimal import Decimal


class LedgerError(ValueError):
    """Base class for recoverable ledger errors."""


class NotFoundError(LedgerError):
    """A group, ledger, voucher or party id does not exist."""


class DuplicateError(LedgerError):
    """An id or unique name is already taken."""


class InvalidVoucherError(LedgerError):
    """A voucher is structurally invalid (zero total, closed account...)."""


class UnbalancedVoucherError(InvalidVoucherError):
    """Total debits differ from total credits."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Voucher does not balance: "
            f"debits={total_debit}, credits={total_credit}"
        )


class UnknownAccountError(InvalidVoucherError):
    """A voucher line references a ledger that does not exist."""

    def __init__(self, account_ids):
        self.account_ids = sorted(account_ids)
        super().__init__(f"Accounts not found: {self.account_ids}")


class CycleDetectedError(LedgerError):
    """A group would become (or is) its own ancestor."""


class ClosedPeriodError(LedgerError):
    """A voucher date falls inside a locked period."""


class PartyLedgerConflictError(LedgerError):
    """A party's ledger kept colliding with concurrent writes."""
