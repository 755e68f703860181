"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class Nature(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        return self in (Nature.ASSET, Nature.EXPENSE)

    @property
    def normal_sign(self) -> int:
        """+1 for debit-normal natures, -1 for credit-normal ones."""
        return 1 if self.is_debit_normal else -1


class DrCr(str, enum.Enum):
    """Side of an opening balance."""
    DR = "DR"
    CR = "CR"


class LedgerType(str, enum.Enum):
    CASH = "CASH"
    BANK = "BANK"
    RECEIVABLE = "RECEIVABLE"
    PAYABLE = "PAYABLE"
    INVENTORY = "INVENTORY"
    FIXED_ASSET = "FIXED_ASSET"
    DEPRECIATION = "DEPRECIATION"
    GST_INPUT = "GST_INPUT"
    GST_OUTPUT = "GST_OUTPUT"
    TDS = "TDS"
    TCS = "TCS"
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"
    CAPITAL = "CAPITAL"
    LOAN = "LOAN"
    ROUND_OFF = "ROUND_OFF"
    SUSPENSE = "SUSPENSE"
    OTHER = "OTHER"


class LedgerStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class GroupRole(str, enum.Enum):
    """
    Canonical roles a group can play.

    Postings look groups up by role instead of by id, so the
    chart can be restructured without breaking them.
    """
    CASH_AND_BANK = "CASH_AND_BANK"
    TRADE_RECEIVABLES = "TRADE_RECEIVABLES"
    INVENTORY = "INVENTORY"
    TRADE_PAYABLES = "TRADE_PAYABLES"
    COST_OF_GOODS_SOLD = "COST_OF_GOODS_SOLD"
    OPERATING_INCOME = "OPERATING_INCOME"
    INDIRECT_EXPENSES = "INDIRECT_EXPENSES"
    RETAINED_EARNINGS = "RETAINED_EARNINGS"


class VoucherType(str, enum.Enum):
    """Informational only; every type obeys the same balance rule."""
    JOURNAL = "Journal"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    CONTRA = "Contra"
    SALES = "Sales"
    PURCHASE = "Purchase"
    CREDIT_NOTE = "Credit Note"
    DEBIT_NOTE = "Debit Note"


class PartyType(str, enum.Enum):
    CUSTOMER = "Customer"
    SUPPLIER = "Supplier"
    VENDOR = "Vendor"
    PARTNER = "Partner"

    @property
    def is_customer(self) -> bool:
        return self is PartyType.CUSTOMER
