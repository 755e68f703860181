"""
Report engine.

Builds the report views on top of BalanceService output:
trial balance, group roll-ups, profit & loss, receivables and
payables, balance sheet, ledger statements, day book and the
cash & bank summary.

Balances arrive debit-positive. Reports that present amounts
to people (P&L, balance sheet trees) multiply each figure by
its nature's normal sign: +1 for ASSET and EXPENSE, -1 for
LIABILITY, EQUITY and INCOME. A figure is therefore positive
when it sits on its normal side. The trial balance keeps raw
signs and splits them into debit and credit columns.

Integrity problems in stored data become alerts on the report;
a corrupt chart (cyclic groups) fails only the report that hits it.
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from general_ledger.config import get_settings
from general_ledger.exceptions import CycleDetectedError, LedgerError, NotFoundError
from general_ledger.models.enums import GroupRole, LedgerType, Nature
from general_ledger.models.group import CoaGroup
from general_ledger.models.ledger import CoaLedger
from general_ledger.models.voucher import Voucher
from general_ledger.schemas.report import (
    BalanceSheetReport,
    CashAndBankSummary,
    CashBankLine,
    GroupNode,
    IntegrityAlert,
    LedgerLine,
    LedgerStatement,
    PartyBalance,
    ProfitAndLossReport,
    ReceivablesPayablesReport,
    StatementRow,
    TrialBalanceReport,
    TrialBalanceRow,
)
from general_ledger.services.balance_service import (
    ZERO,
    BalanceService,
    BalanceSnapshot,
)
from general_ledger.services.chart_service import ChartService
from general_ledger.services.cogs import OrderSource, compute_cogs
from general_ledger.services.journal_service import JournalService
from general_ledger.services.periods import financial_year, financial_year_label

logger = logging.getLogger(__name__)


@dataclass
class ChartIndex:
    """The chart loaded once per report, indexed for tree walks."""
    groups: dict[str, CoaGroup]
    children: dict[str | None, list[CoaGroup]]
    ledgers: dict[str, list[CoaLedger]]

    @classmethod
    def load(cls, chart: ChartService) -> "ChartIndex":
        groups = {g.id: g for g in chart.all_groups()}
        children: dict[str | None, list[CoaGroup]] = defaultdict(list)
        for group in groups.values():
            children[group.parent_id or None].append(group)
        for siblings in children.values():
            siblings.sort(key=lambda g: (g.sort_order, g.id))

        ledgers: dict[str, list[CoaLedger]] = defaultdict(list)
        for ledger in chart.all_ledgers():
            ledgers[ledger.group_id].append(ledger)

        index = cls(groups=groups, children=children, ledgers=ledgers)
        # Groups on a parent loop (or under a missing parent) hang
        # under no root; rolling up without them would drop their ledgers.
        reachable: set[str] = set()
        for root in index.roots:
            reachable |= index.subtree_ids(root.id)
        stranded = sorted(set(groups) - reachable)
        if stranded:
            raise CycleDetectedError(
                f"Groups not reachable from any root: {stranded}"
            )
        return index

    @property
    def roots(self) -> list[CoaGroup]:
        return self.children.get(None, [])

    def subtree_ids(self, group_id: str) -> set[str]:
        """The group and all its descendants."""
        found: set[str] = set()
        stack = [group_id]
        while stack:
            current = stack.pop()
            if current in found:
                raise CycleDetectedError(
                    f"Group {current} appears twice below {group_id}"
                )
            found.add(current)
            stack.extend(child.id for child in self.children.get(current, []))
        return found


class ReportService:

    def __init__(self, db: Session):
        self.db = db
        self.chart = ChartService(db)
        self.journal = JournalService(db)
        self.balances = BalanceService(db)
        self.tolerance = get_settings().TRIAL_BALANCE_TOLERANCE

    # --- Group roll-ups ---

    def group_tree(
        self,
        group_id: str,
        balances: BalanceSnapshot | dict[str, Decimal],
        sign: int = 1,
        exclude: frozenset[str] = frozenset(),
        index: ChartIndex | None = None,
    ) -> GroupNode:
        """
        Roll a group's subtree up into a GroupNode.

        node.balance = direct ledgers + child groups, each figure
        multiplied by `sign`. Groups in `exclude` are left out
        with their whole subtree. Ledger lines with a zero balance
        and empty child groups are pruned from the output; they
        contribute nothing to the totals.
        """
        index = index or ChartIndex.load(self.chart)
        if group_id not in index.groups:
            raise NotFoundError(f"Group {group_id} not found")
        values = balances.balances if isinstance(balances, BalanceSnapshot) else balances
        return self._build_node(
            index, index.groups[group_id], values, sign, exclude, frozenset()
        )

    def group_balance(
        self,
        group_id: str,
        balances: BalanceSnapshot | dict[str, Decimal],
        index: ChartIndex | None = None,
    ) -> Decimal:
        """Signed (debit-positive) balance of a group's subtree."""
        return self.group_tree(group_id, balances, index=index).balance

    def _build_node(self, index, group, values, sign, exclude, path) -> GroupNode:
        if group.id in path:
            raise CycleDetectedError(
                f"Group {group.id} is its own ancestor"
            )
        path = path | {group.id}

        lines = [
            LedgerLine(
                ledger_id=ledger.id,
                name=ledger.name,
                balance=sign * values.get(ledger.id, ZERO),
            )
            for ledger in index.ledgers.get(group.id, [])
        ]
        children = [
            self._build_node(index, child, values, sign, exclude, path)
            for child in index.children.get(group.id, [])
            if child.id not in exclude
        ]

        balance = sum((line.balance for line in lines), ZERO) + sum(
            (child.balance for child in children), ZERO
        )
        return GroupNode(
            group_id=group.id,
            name=group.name,
            nature=group.nature,
            balance=balance,
            ledgers=[line for line in lines if line.balance != 0],
            children=[
                child for child in children
                if child.balance != 0 or child.ledgers or child.children
            ],
        )

    def _roots_of(self, index: ChartIndex, nature: Nature, exclude=frozenset()):
        return [
            g for g in index.roots
            if g.nature == nature and g.id not in exclude
        ]

    # --- Trial Balance ---

    def trial_balance(
        self,
        as_of: dt.date | None = None,
        from_date: dt.date | None = None,
        fiscal_year: int | None = None,
    ) -> TrialBalanceReport:
        """
        Split closing balances into debit and credit columns.

        Totals are verified, not assumed: a difference above the
        configured tolerance adds a TRIAL_BALANCE_MISMATCH alert.
        With from_date, each row also shows the opening balance,
        the period's debits and credits, and the closing balance.
        fiscal_year (the year the financial year starts in) is a
        shorthand for that year's window.
        """
        from_date, as_of, label = self._fiscal_window(fiscal_year, from_date, as_of)
        closing = self.balances.cumulative(as_of)
        alerts = self._unknown_account_alerts(closing)

        opening = turnover = None
        if from_date is not None:
            opening = self.balances.period_opening(from_date)
            turnover = self.balances.turnover(from_date, as_of)

        rows = []
        for ledger in self.chart.all_ledgers():
            balance = closing.get(ledger.id)
            period_debit, period_credit = (
                turnover.get(ledger.id, (ZERO, ZERO)) if turnover is not None
                else (ZERO, ZERO)
            )
            if balance == 0 and period_debit == 0 and period_credit == 0:
                continue

            row = TrialBalanceRow(
                ledger_id=ledger.id,
                ledger_name=ledger.name,
                debit=max(balance, ZERO),
                credit=max(-balance, ZERO),
            )
            if opening is not None:
                row.opening = opening.get(ledger.id)
                row.period_debit = period_debit
                row.period_credit = period_credit
                row.closing = balance
            rows.append(row)

        total_debit = sum((row.debit for row in rows), ZERO)
        total_credit = sum((row.credit for row in rows), ZERO)
        difference = abs(total_debit - total_credit)
        is_balanced = difference <= self.tolerance

        if not is_balanced:
            logger.warning(
                "Trial balance mismatch as of %s: debit=%s credit=%s",
                as_of, total_debit, total_credit,
            )
            alerts.append(IntegrityAlert(
                code="TRIAL_BALANCE_MISMATCH",
                message="Total debits do not equal total credits",
                details={
                    "total_debit": str(total_debit),
                    "total_credit": str(total_credit),
                    "difference": str(difference),
                },
            ))

        return TrialBalanceReport(
            as_of=as_of,
            from_date=from_date,
            period_label=label,
            rows=rows,
            total_debit=total_debit,
            total_credit=total_credit,
            is_balanced=is_balanced,
            alerts=alerts,
        )

    # --- Profit & Loss ---

    def profit_and_loss(
        self,
        from_date: dt.date | None = None,
        to_date: dt.date | None = None,
        order_source: OrderSource | None = None,
        fiscal_year: int | None = None,
    ) -> ProfitAndLossReport:
        """
        Income, expenses, COGS and net profit for a period.

        Uses the period's movement (or everything up to to_date
        when no from_date is given). fiscal_year selects a whole
        financial year instead. The cost-of-goods-sold group
        is kept out of the expense tree. COGS comes from the order
        bridge when an order_source is passed, otherwise from the
        balance of the COGS group.
        """
        from_date, to_date, label = self._fiscal_window(fiscal_year, from_date, to_date)
        snapshot = self.balances.compute_balances(as_of=to_date, from_date=from_date)
        index = ChartIndex.load(self.chart)
        values = snapshot.balances

        cogs_group = self._optional_role(GroupRole.COST_OF_GOODS_SOLD)
        exclude = frozenset({cogs_group.id}) if cogs_group else frozenset()

        income_tree = [
            self._build_node(index, g, values, -1, exclude, frozenset())
            for g in self._roots_of(index, Nature.INCOME, exclude)
        ]
        expense_tree = [
            self._build_node(index, g, values, 1, exclude, frozenset())
            for g in self._roots_of(index, Nature.EXPENSE, exclude)
        ]
        total_income = sum((node.balance for node in income_tree), ZERO)
        total_expenses = sum((node.balance for node in expense_tree), ZERO)

        if order_source is not None:
            cogs = compute_cogs(order_source, from_date, to_date)
            cogs_source = "orders"
        else:
            cogs = (
                self._build_node(index, cogs_group, values, 1, frozenset(), frozenset()).balance
                if cogs_group else ZERO
            )
            cogs_source = "ledger"

        return ProfitAndLossReport(
            from_date=from_date,
            to_date=to_date,
            period_label=label,
            income_tree=income_tree,
            expense_tree=expense_tree,
            cogs=cogs,
            cogs_source=cogs_source,
            total_income=total_income,
            total_expenses=total_expenses,
            net_profit=total_income - total_expenses - cogs,
        )

    # --- Receivables / Payables ---

    def receivables_payables(
        self, as_of: dt.date | None = None
    ) -> ReceivablesPayablesReport:
        """
        Split party balances into receivables and payables.

        Scope: RECEIVABLE/PAYABLE ledgers and every ledger below
        the trade receivables or trade payables groups. Classified
        by (nature, sign):

        - debit balance (ASSET or LIABILITY): receivable
        - LIABILITY with a credit balance: payable
        - ASSET with a credit balance (a customer advance): listed
          under `abnormal` only, never as a payable

        Every ledger off its nature's normal side also appears
        under `abnormal`, so the data problem stays visible.
        """
        snapshot = self.balances.cumulative(as_of)
        index = ChartIndex.load(self.chart)

        scoped_groups: set[str] = set()
        for role in (GroupRole.TRADE_RECEIVABLES, GroupRole.TRADE_PAYABLES):
            group = self._optional_role(role)
            if group:
                scoped_groups |= index.subtree_ids(group.id)

        receivables, payables, abnormal = [], [], []
        for ledger in self.chart.all_ledgers():
            in_scope = (
                ledger.ledger_type in (LedgerType.RECEIVABLE, LedgerType.PAYABLE)
                or ledger.group_id in scoped_groups
            )
            balance = snapshot.get(ledger.id)
            if not in_scope or balance == 0:
                continue

            line = PartyBalance(
                ledger_id=ledger.id,
                name=ledger.name,
                nature=ledger.nature,
                amount=abs(balance),
            )
            if balance > 0:
                receivables.append(line)
            elif ledger.nature != Nature.ASSET:
                payables.append(line)
            if balance * ledger.nature.normal_sign < 0:
                abnormal.append(line)

        total_receivables = sum((r.amount for r in receivables), ZERO)
        total_payables = sum((p.amount for p in payables), ZERO)
        return ReceivablesPayablesReport(
            as_of=as_of,
            receivables=receivables,
            payables=payables,
            total_receivables=total_receivables,
            total_payables=total_payables,
            net_working_capital=total_receivables - total_payables,
            abnormal=abnormal,
        )

    # --- Balance Sheet ---

    def balance_sheet(self, as_of: dt.date | None = None) -> BalanceSheetReport:
        snapshot = self.balances.cumulative(as_of)
        alerts = self._unknown_account_alerts(snapshot)
        index = ChartIndex.load(self.chart)
        values = snapshot.balances

        def trees(nature: Nature) -> list[GroupNode]:
            return [
                self._build_node(index, g, values, nature.normal_sign,
                                 frozenset(), frozenset())
                for g in self._roots_of(index, nature)
            ]

        assets = trees(Nature.ASSET)
        liabilities = trees(Nature.LIABILITY)
        equity = trees(Nature.EQUITY)
        # Income and expense trees in presentation sign: income minus expenses.
        current_profit = sum(
            (node.balance for node in trees(Nature.INCOME)), ZERO
        ) - sum((node.balance for node in trees(Nature.EXPENSE)), ZERO)

        total_assets = sum((node.balance for node in assets), ZERO)
        total_liabilities = sum((node.balance for node in liabilities), ZERO)
        total_equity = sum((node.balance for node in equity), ZERO)

        difference = abs(
            total_assets - (total_liabilities + total_equity + current_profit)
        )
        is_balanced = difference <= self.tolerance
        if not is_balanced:
            logger.warning("Balance sheet out of balance by %s", difference)
            alerts.append(IntegrityAlert(
                code="BALANCE_SHEET_MISMATCH",
                message="Assets do not equal liabilities, equity and profit",
                details={"difference": str(difference)},
            ))

        return BalanceSheetReport(
            as_of=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            current_profit=current_profit,
            is_balanced=is_balanced,
            alerts=alerts,
        )

    # --- Ledger Statement ---

    def ledger_statement(
        self,
        ledger_id: str,
        from_date: dt.date | None = None,
        to_date: dt.date | None = None,
    ) -> LedgerStatement:
        """
        Running statement of one ledger.

        The opening balance is the ledger's cumulative balance the
        day before from_date (its own opening balance when there
        is no from_date). Several lines of one voucher on the same
        ledger make a single row.
        """
        ledger = self.chart.get_ledger(ledger_id)
        if from_date is not None:
            opening = self.balances.period_opening(from_date).get(ledger_id)
        else:
            opening = ledger.signed_opening

        running = opening
        rows = []
        for voucher in self.journal.list_in_range(from_date, to_date):
            lines = [e for e in voucher.entries if e.account_id == ledger_id]
            if not lines:
                continue
            debit = sum((Decimal(e.debit) for e in lines), ZERO)
            credit = sum((Decimal(e.credit) for e in lines), ZERO)
            running += debit - credit
            rows.append(StatementRow(
                voucher_id=voucher.id,
                date=voucher.date,
                narration=voucher.narration,
                debit=debit,
                credit=credit,
                balance=running,
            ))

        return LedgerStatement(
            ledger_id=ledger.id,
            ledger_name=ledger.name,
            from_date=from_date,
            to_date=to_date,
            opening_balance=opening,
            rows=rows,
            total_debit=sum((r.debit for r in rows), ZERO),
            total_credit=sum((r.credit for r in rows), ZERO),
            closing_balance=running,
        )

    # --- Day Book ---

    def day_book(self, on: dt.date) -> list[Voucher]:
        return list(self.journal.list_in_range(on, on))

    # --- Cash & Bank ---

    def cash_and_bank(self, as_of: dt.date | None = None) -> CashAndBankSummary:
        """Cash and bank balances, plus the day's movement through them."""
        snapshot = self.balances.cumulative(as_of)
        day = as_of or dt.date.today()

        liquid = [
            ledger for ledger in self.chart.all_ledgers()
            if ledger.ledger_type in (LedgerType.CASH, LedgerType.BANK)
        ]
        liquid_ids = {ledger.id for ledger in liquid}

        inflow = outflow = ZERO
        for voucher in self.journal.list_in_range(day, day):
            for entry in voucher.entries:
                if entry.account_id in liquid_ids:
                    inflow += Decimal(entry.debit)
                    outflow += Decimal(entry.credit)

        lines = [
            CashBankLine(
                ledger_id=ledger.id,
                name=ledger.name,
                ledger_type=ledger.ledger_type,
                balance=snapshot.get(ledger.id),
            )
            for ledger in liquid
        ]
        return CashAndBankSummary(
            as_of=as_of,
            ledgers=lines,
            cash_total=sum(
                (l.balance for l in lines if l.ledger_type == LedgerType.CASH), ZERO
            ),
            bank_total=sum(
                (l.balance for l in lines if l.ledger_type == LedgerType.BANK), ZERO
            ),
            inflow=inflow,
            outflow=outflow,
        )

    # --- Helpers ---

    def _fiscal_window(
        self,
        fiscal_year: int | None,
        start: dt.date | None,
        end: dt.date | None,
    ) -> tuple[dt.date | None, dt.date | None, str | None]:
        if fiscal_year is None:
            return start, end, None
        if start is not None or end is not None:
            raise LedgerError("Pass either a fiscal year or explicit dates, not both")
        first, last = financial_year(fiscal_year)
        return first, last, financial_year_label(fiscal_year)

    def _optional_role(self, role: GroupRole) -> CoaGroup | None:
        try:
            return self.chart.canonical_group(role)
        except NotFoundError:
            return None

    @staticmethod
    def _unknown_account_alerts(snapshot: BalanceSnapshot) -> list[IntegrityAlert]:
        if not snapshot.unknown_accounts:
            return []
        return [IntegrityAlert(
            code="UNKNOWN_ACCOUNTS",
            message="Voucher lines reference ledgers missing from the chart",
            details={"accounts": dict(snapshot.unknown_accounts)},
        )]
