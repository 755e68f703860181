"""
Pydantic schemas for report output.

Reports are produced for the presentation layer. They carry
integrity alerts instead of raising, so historical data with
drift can still be viewed.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from general_ledger.models.enums import Nature, LedgerType


class IntegrityAlert(BaseModel):
    """A non-fatal data-integrity warning attached to a report."""
    code: str
    message: str
    details: dict = Field(default_factory=dict)


class BalanceResponse(BaseModel):
    """Raw signed balances, debit positive."""
    as_of: dt.date | None
    from_date: dt.date | None
    mode: str
    balances: dict[str, Decimal]
    alerts: list[IntegrityAlert] = Field(default_factory=list)


# --- Trial Balance ---

class TrialBalanceRow(BaseModel):
    ledger_id: str
    ledger_name: str
    debit: Decimal
    credit: Decimal
    # Only filled for period trial balances.
    opening: Decimal | None = None
    period_debit: Decimal | None = None
    period_credit: Decimal | None = None
    closing: Decimal | None = None


class TrialBalanceReport(BaseModel):
    as_of: dt.date | None
    from_date: dt.date | None
    period_label: str | None = None
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool
    alerts: list[IntegrityAlert] = Field(default_factory=list)


# --- Group Trees ---

class LedgerLine(BaseModel):
    ledger_id: str
    name: str
    balance: Decimal


class GroupNode(BaseModel):
    group_id: str
    name: str
    nature: Nature
    balance: Decimal
    ledgers: list[LedgerLine] = Field(default_factory=list)
    children: list["GroupNode"] = Field(default_factory=list)


# --- Profit & Loss ---

class ProfitAndLossReport(BaseModel):
    """
    Amounts are in presentation sign: income and expenses are
    both positive when they have their normal balance.
    """
    from_date: dt.date | None
    to_date: dt.date | None
    period_label: str | None = None
    income_tree: list[GroupNode]
    expense_tree: list[GroupNode]
    cogs: Decimal
    cogs_source: str
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal


# --- Receivables / Payables ---

class PartyBalance(BaseModel):
    ledger_id: str
    name: str
    nature: Nature
    amount: Decimal


class ReceivablesPayablesReport(BaseModel):
    as_of: dt.date | None
    receivables: list[PartyBalance]
    payables: list[PartyBalance]
    total_receivables: Decimal
    total_payables: Decimal
    net_working_capital: Decimal
    abnormal: list[PartyBalance] = Field(default_factory=list)


# --- Balance Sheet ---

class BalanceSheetReport(BaseModel):
    as_of: dt.date | None
    assets: list[GroupNode]
    liabilities: list[GroupNode]
    equity: list[GroupNode]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    current_profit: Decimal
    is_balanced: bool
    alerts: list[IntegrityAlert] = Field(default_factory=list)


# --- Ledger Statement ---

class StatementRow(BaseModel):
    voucher_id: int
    date: dt.date
    narration: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


class LedgerStatement(BaseModel):
    ledger_id: str
    ledger_name: str
    from_date: dt.date | None
    to_date: dt.date | None
    opening_balance: Decimal
    rows: list[StatementRow]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


# --- Cash & Bank ---

class CashBankLine(BaseModel):
    ledger_id: str
    name: str
    ledger_type: LedgerType
    balance: Decimal


class CashAndBankSummary(BaseModel):
    as_of: dt.date | None
    ledgers: list[CashBankLine]
    cash_total: Decimal
    bank_total: Decimal
    inflow: Decimal
    outflow: Decimal
