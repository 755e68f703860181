"""Business logic services."""

from general_ledger.services.chart_service import ChartService
from general_ledger.services.journal_service import JournalService
from general_ledger.services.balance_service import BalanceService
from general_ledger.services.party_service import PartyService, PartyLedgerBinder
from general_ledger.services.report_service import ReportService

__all__ = [
    "ChartService",
    "JournalService",
    "BalanceService",
    "PartyService",
    "PartyLedgerBinder",
    "ReportService",
]
