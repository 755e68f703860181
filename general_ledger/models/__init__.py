"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from general_ledger.models.base import Base
from general_ledger.models.enums import (
    Nature,
    DrCr,
    LedgerType,
    LedgerStatus,
    GroupRole,
    VoucherType,
    PartyType,
)
from general_ledger.models.group import CoaGroup
from general_ledger.models.ledger import CoaLedger
from general_ledger.models.voucher import Voucher, VoucherEntry
from general_ledger.models.party import Party
from general_ledger.models.book_lock import BookLock

__all__ = [
    "Base",
    "Nature",
    "DrCr",
    "LedgerType",
    "LedgerStatus",
    "GroupRole",
    "VoucherType",
    "PartyType",
    "CoaGroup",
    "CoaLedger",
    "Voucher",
    "VoucherEntry",
    "Party",
    "BookLock",
]
