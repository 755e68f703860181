"""
Report API endpoints.

Read-only. Every report is derived from the journal on request;
integrity problems come back as alerts inside the report body.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError
from general_ledger.models.base import get_db
from general_ledger.services.balance_service import BalanceService
from general_ledger.services.periods import financial_year_for
from general_ledger.services.report_service import ReportService
from general_ledger.schemas.report import (
    BalanceResponse,
    BalanceSheetReport,
    CashAndBankSummary,
    IntegrityAlert,
    LedgerStatement,
    ProfitAndLossReport,
    ReceivablesPayablesReport,
    TrialBalanceReport,
)
from general_ledger.schemas.voucher import VoucherResponse

router = APIRouter(prefix="/reports", tags=["Reports"])


def _error(e: ValueError) -> HTTPException:
    status = 404 if isinstance(e, NotFoundError) else 400
    return HTTPException(status_code=status, detail=str(e))


@router.get("/balances", response_model=BalanceResponse)
def get_balances(
    as_of: dt.date | None = None,
    from_date: dt.date | None = None,
    db: Session = Depends(get_db),
):
    """
    Signed balance of every ledger, debit positive.

    Cumulative up to as_of, or the movement from from_date
    to as_of when from_date is given.
    """
    service = BalanceService(db)
    try:
        snapshot = service.compute_balances(as_of=as_of, from_date=from_date)
    except ValueError as e:
        raise _error(e)

    alerts = []
    if snapshot.unknown_accounts:
        alerts.append(IntegrityAlert(
            code="UNKNOWN_ACCOUNTS",
            message="Voucher lines reference ledgers missing from the chart",
            details={"accounts": snapshot.unknown_accounts},
        ))
    return BalanceResponse(
        as_of=snapshot.as_of,
        from_date=snapshot.from_date,
        mode=snapshot.mode.value,
        balances=snapshot.balances,
        alerts=alerts,
    )


@router.get("/trial-balance", response_model=TrialBalanceReport)
def get_trial_balance(
    as_of: dt.date | None = None,
    from_date: dt.date | None = None,
    fiscal_year: int | None = None,
    db: Session = Depends(get_db),
):
    """
    Closing balances as of a date. With from_date, or fiscal_year
    for a whole financial year, rows also carry period columns.
    """
    try:
        return ReportService(db).trial_balance(
            as_of=as_of, from_date=from_date, fiscal_year=fiscal_year
        )
    except ValueError as e:
        raise _error(e)


@router.get("/profit-and-loss", response_model=ProfitAndLossReport)
def get_profit_and_loss(
    from_date: dt.date | None = None,
    to_date: dt.date | None = None,
    fiscal_year: int | None = None,
    db: Session = Depends(get_db),
):
    """P&L for a window; without one, the current financial year."""
    try:
        if from_date is None and to_date is None and fiscal_year is None:
            fiscal_year = financial_year_for(dt.date.today())[0].year
        return ReportService(db).profit_and_loss(
            from_date=from_date, to_date=to_date, fiscal_year=fiscal_year
        )
    except ValueError as e:
        raise _error(e)


@router.get("/receivables-payables", response_model=ReceivablesPayablesReport)
def get_receivables_payables(
    as_of: dt.date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return ReportService(db).receivables_payables(as_of=as_of)
    except ValueError as e:
        raise _error(e)


@router.get("/balance-sheet", response_model=BalanceSheetReport)
def get_balance_sheet(
    as_of: dt.date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return ReportService(db).balance_sheet(as_of=as_of)
    except ValueError as e:
        raise _error(e)


@router.get("/ledger-statement/{ledger_id}", response_model=LedgerStatement)
def get_ledger_statement(
    ledger_id: str,
    from_date: dt.date | None = None,
    to_date: dt.date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return ReportService(db).ledger_statement(
            ledger_id, from_date=from_date, to_date=to_date
        )
    except ValueError as e:
        raise _error(e)


@router.get("/day-book", response_model=list[VoucherResponse])
def get_day_book(
    on: dt.date,
    db: Session = Depends(get_db),
):
    return ReportService(db).day_book(on)


@router.get("/cash-and-bank", response_model=CashAndBankSummary)
def get_cash_and_bank(
    as_of: dt.date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return ReportService(db).cash_and_bank(as_of=as_of)
    except ValueError as e:
        raise _error(e)
