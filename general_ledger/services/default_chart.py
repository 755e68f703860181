"""
Default chart of accounts.

The standard group tree (Indian GAAP layout: assets, liabilities,
equity, income, cost of goods sold, indirect expenses, system
groups) and the ledgers a new company starts with. Group ids
encode the tree path; code never relies on that, it looks groups
up by role.
"""

from general_ledger.models.enums import GroupRole, LedgerType, Nature
from general_ledger.schemas.coa import GroupCreate, LedgerCreate


def _group(id, name, nature, parent_id=None, sort_order=0, role=None, is_system=False):
    return GroupCreate(
        id=id,
        name=name,
        nature=nature,
        parent_id=parent_id,
        sort_order=sort_order,
        role=role,
        is_system=is_system,
    )


def _ledger(id, name, group_id, nature, ledger_type=LedgerType.OTHER):
    return LedgerCreate(
        id=id,
        name=name,
        group_id=group_id,
        nature=nature,
        ledger_type=ledger_type,
    )


A, L, Q, I, X = (
    Nature.ASSET,
    Nature.LIABILITY,
    Nature.EQUITY,
    Nature.INCOME,
    Nature.EXPENSE,
)

# Parents come before children.
DEFAULT_GROUPS = [
    _group("1", "ASSETS", A, sort_order=1),
    _group("1.1", "Current Assets", A, "1", 1),
    _group("1.1.1", "Cash & Bank", A, "1.1", 1, GroupRole.CASH_AND_BANK),
    _group("1.1.2", "Trade Receivables", A, "1.1", 2, GroupRole.TRADE_RECEIVABLES),
    _group("1.1.3", "Inventory", A, "1.1", 3, GroupRole.INVENTORY),
    _group("1.1.4", "Other Current Assets", A, "1.1", 4),
    _group("1.2", "Non-Current Assets", A, "1", 2),
    _group("1.2.1", "Fixed Assets – Tangible", A, "1.2", 1),
    _group("1.2.2", "Fixed Assets – Intangible", A, "1.2", 2),
    _group("1.2.3", "Accumulated Depreciation (Contra Assets)", A, "1.2", 3),

    _group("2", "LIABILITIES", L, sort_order=2),
    _group("2.1", "Current Liabilities", L, "2", 1),
    _group("2.1.1", "Trade Payables", L, "2.1", 1, GroupRole.TRADE_PAYABLES),
    _group("2.1.2", "Statutory Liabilities", L, "2.1", 2),
    _group("2.1.3", "Other Current Liabilities", L, "2.1", 3),
    _group("2.2", "Non-Current Liabilities", L, "2", 2),
    _group("2.2.1", "Borrowings", L, "2.2", 1),

    _group("3", "EQUITY", Q, sort_order=3),
    _group("3.1", "Share Capital", Q, "3", 1),
    _group("3.2", "Reserves & Surplus", Q, "3", 2, GroupRole.RETAINED_EARNINGS),
    _group("3.3", "Drawings", Q, "3", 3),

    _group("4", "INCOME", I, sort_order=4),
    _group("4.1", "Operating Income", I, "4", 1, GroupRole.OPERATING_INCOME),
    _group("4.2", "Other Income", I, "4", 2),

    _group("5", "COST OF GOODS SOLD (COGS)", X, sort_order=5,
           role=GroupRole.COST_OF_GOODS_SOLD),

    _group("6", "EXPENSES (INDIRECT)", X, sort_order=6,
           role=GroupRole.INDIRECT_EXPENSES),
    _group("6.1", "Administrative Expenses", X, "6", 1),
    _group("6.2", "Selling & Distribution Expenses", X, "6", 2),
    _group("6.3", "Employee Expenses", X, "6", 3),
    _group("6.4", "Finance Costs", X, "6", 4),
    _group("6.5", "Depreciation", X, "6", 5),

    _group("8", "SYSTEM / AUTO-CREATED GROUPS", A, sort_order=8, is_system=True),
]

DEFAULT_LEDGERS = [
    _ledger("L-1.1.1-1", "Cash in Hand", "1.1.1", A, LedgerType.CASH),
    _ledger("L-1.1.1-2", "Bank – Current Account", "1.1.1", A, LedgerType.BANK),
    _ledger("L-1.1.1-3", "Bank – Savings Account", "1.1.1", A, LedgerType.BANK),

    _ledger("L-1.1.2-1", "Trade Debtors – Domestic", "1.1.2", A, LedgerType.RECEIVABLE),
    _ledger("L-1.1.2-2", "Trade Debtors – Export", "1.1.2", A, LedgerType.RECEIVABLE),

    _ledger("L-1.1.3-1", "Stock-in-Hand – Finished Goods", "1.1.3", A, LedgerType.INVENTORY),
    _ledger("L-1.1.3-2", "Stock-in-Hand – Raw Material", "1.1.3", A, LedgerType.INVENTORY),

    _ledger("L-1.1.4-1", "Input GST – CGST", "1.1.4", A, LedgerType.GST_INPUT),
    _ledger("L-1.1.4-2", "Input GST – SGST", "1.1.4", A, LedgerType.GST_INPUT),
    _ledger("L-1.1.4-6", "Advance to Suppliers", "1.1.4", A),
    _ledger("L-1.1.4-7", "Prepaid Expenses", "1.1.4", A),

    _ledger("L-1.2.1-3", "Plant & Machinery", "1.2.1", A, LedgerType.FIXED_ASSET),
    _ledger("L-1.2.1-5", "Office Equipment", "1.2.1", A, LedgerType.FIXED_ASSET),
    _ledger("L-1.2.1-7", "Computers & IT Equipment", "1.2.1", A, LedgerType.FIXED_ASSET),
    _ledger("L-1.2.2-1", "Software", "1.2.2", A, LedgerType.FIXED_ASSET),
    _ledger("L-1.2.3-2", "Accumulated Depreciation – Machinery", "1.2.3", A,
            LedgerType.DEPRECIATION),

    _ledger("L-2.1.1-1", "Trade Creditors – Domestic", "2.1.1", L, LedgerType.PAYABLE),
    _ledger("L-2.1.1-2", "Trade Creditors – Import", "2.1.1", L, LedgerType.PAYABLE),

    _ledger("L-2.1.2-1", "Output GST – CGST", "2.1.2", L, LedgerType.GST_OUTPUT),
    _ledger("L-2.1.2-2", "Output GST – SGST", "2.1.2", L, LedgerType.GST_OUTPUT),
    _ledger("L-2.1.2-5", "TDS Payable", "2.1.2", L, LedgerType.TDS),

    _ledger("L-2.1.3-1", "Outstanding Expenses", "2.1.3", L),
    _ledger("L-2.1.3-2", "Salary Payable", "2.1.3", L),
    _ledger("L-2.1.3-5", "Unearned Revenue", "2.1.3", L),

    _ledger("L-2.2.1-1", "Term Loan – Bank", "2.2.1", L, LedgerType.LOAN),

    _ledger("L-3.1-1", "Equity Share Capital", "3.1", Q, LedgerType.CAPITAL),
    _ledger("L-3.2-3", "Retained Earnings / P&L Balance", "3.2", Q),
    _ledger("L-3.3-1", "Director Drawings", "3.3", Q),

    _ledger("L-4.1-1", "Sales – Domestic", "4.1", I, LedgerType.INCOME),
    _ledger("L-4.1-2", "Sales – Export", "4.1", I, LedgerType.INCOME),
    _ledger("L-4.1-3", "Service Income", "4.1", I, LedgerType.INCOME),
    _ledger("L-4.2-1", "Interest Income", "4.2", I, LedgerType.INCOME),
    _ledger("L-4.2-2", "Discount Received", "4.2", I, LedgerType.INCOME),

    _ledger("L-5-1", "Cost of Goods Sold", "5", X, LedgerType.EXPENSE),
    _ledger("L-5-2", "Purchase – Raw Material", "5", X, LedgerType.EXPENSE),
    _ledger("L-5-3", "Purchase – Finished Goods", "5", X, LedgerType.EXPENSE),
    _ledger("L-5-4", "Direct Labour", "5", X, LedgerType.EXPENSE),
    _ledger("L-5-7", "Freight Inward", "5", X, LedgerType.EXPENSE),

    _ledger("L-6.1-1", "Office Rent", "6.1", X, LedgerType.EXPENSE),
    _ledger("L-6.1-2", "Office Electricity", "6.1", X, LedgerType.EXPENSE),
    _ledger("L-6.1-5", "Legal & Professional Fees", "6.1", X, LedgerType.EXPENSE),
    _ledger("L-6.2-3", "Advertisement & Marketing", "6.2", X, LedgerType.EXPENSE),
    _ledger("L-6.2-4", "Freight Outward", "6.2", X, LedgerType.EXPENSE),
    _ledger("L-6.3-1", "Salaries & Wages", "6.3", X, LedgerType.EXPENSE),
    _ledger("L-6.4-3", "Bank Charges", "6.4", X, LedgerType.EXPENSE),
    _ledger("L-6.5-2", "Depreciation – Machinery", "6.5", X, LedgerType.EXPENSE),

    _ledger("SYS-1", "Opening Balance Adjustment", "8", A, LedgerType.SUSPENSE),
    _ledger("SYS-2", "Round-Off", "8", X, LedgerType.ROUND_OFF),
    _ledger("SYS-5", "Suspense Account", "8", A, LedgerType.SUSPENSE),
]
