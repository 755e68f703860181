"""
Tests for report endpoints.

Report arithmetic is tested in test_report_service.py; these
check the HTTP surface and payload shape.
"""

import datetime as dt
from decimal import Decimal

CASH = "L-1.1.1-1"
SALES = "L-4.1-1"
RENT = "L-6.1-1"


def post(client, date, debit_account, credit_account, amount, narration="Test"):
    response = client.post("/vouchers", json={
        "date": date,
        "narration": narration,
        "entries": [
            {"side": "DR", "account_id": debit_account, "amount": amount},
            {"side": "CR", "account_id": credit_account, "amount": amount},
        ],
    })
    assert response.status_code == 201


def setup_books(client):
    client.post("/coa/seed")
    post(client, "2024-04-05", CASH, SALES, 500, "Cash sale")
    post(client, "2024-04-10", RENT, CASH, 200, "Rent")


class TestBalances:

    def test_cumulative_balances(self, client):
        setup_books(client)

        data = client.get("/reports/balances").json()

        assert data["mode"] == "CUMULATIVE"
        assert Decimal(data["balances"][CASH]) == Decimal("300")
        assert Decimal(data["balances"][SALES]) == Decimal("-500")

    def test_movement_window(self, client):
        setup_books(client)

        data = client.get("/reports/balances", params={"from_date": "2024-04-06"}).json()

        assert data["mode"] == "MOVEMENT"
        assert Decimal(data["balances"][CASH]) == Decimal("-200")

    def test_inverted_window_returns_400(self, client):
        response = client.get("/reports/balances", params={
            "from_date": "2024-05-01", "as_of": "2024-04-01",
        })

        assert response.status_code == 400


class TestReports:

    def test_trial_balance(self, client):
        setup_books(client)

        data = client.get("/reports/trial-balance").json()

        assert data["is_balanced"] is True
        assert Decimal(data["total_debit"]) == Decimal(data["total_credit"]) == Decimal("500")
        assert data["alerts"] == []

    def test_profit_and_loss(self, client):
        setup_books(client)

        data = client.get("/reports/profit-and-loss", params={"fiscal_year": 2024}).json()

        assert data["period_label"] == "FY 2024-25"
        assert data["from_date"] == "2024-04-01"
        assert data["to_date"] == "2025-03-31"
        assert Decimal(data["total_income"]) == Decimal("500")
        assert Decimal(data["total_expenses"]) == Decimal("200")
        assert Decimal(data["net_profit"]) == Decimal("300")
        assert data["income_tree"][0]["group_id"] == "4"

    def test_profit_and_loss_defaults_to_current_financial_year(self, client):
        setup_books(client)
        post(client, dt.date.today().isoformat(), CASH, SALES, 70, "Sale today")

        data = client.get("/reports/profit-and-loss").json()

        assert data["period_label"].startswith("FY ")
        assert Decimal(data["total_income"]) == Decimal("70")
        assert Decimal(data["total_expenses"]) == Decimal("0")

    def test_fiscal_year_with_dates_returns_400(self, client):
        response = client.get("/reports/profit-and-loss", params={
            "fiscal_year": 2024, "from_date": "2024-04-01",
        })

        assert response.status_code == 400

    def test_trial_balance_for_a_fiscal_year(self, client):
        setup_books(client)

        data = client.get("/reports/trial-balance", params={"fiscal_year": 2024}).json()

        assert data["period_label"] == "FY 2024-25"
        assert data["from_date"] == "2024-04-01"
        cash = next(r for r in data["rows"] if r["ledger_id"] == CASH)
        assert Decimal(cash["period_debit"]) == Decimal("500")
        assert Decimal(cash["period_credit"]) == Decimal("200")

    def test_balance_sheet(self, client):
        setup_books(client)

        data = client.get("/reports/balance-sheet").json()

        assert data["is_balanced"] is True
        assert Decimal(data["current_profit"]) == Decimal("300")

    def test_receivables_payables_empty(self, client):
        setup_books(client)

        data = client.get("/reports/receivables-payables").json()

        assert data["receivables"] == []
        assert Decimal(data["net_working_capital"]) == Decimal("0")

    def test_ledger_statement(self, client):
        setup_books(client)

        data = client.get(f"/reports/ledger-statement/{CASH}").json()

        assert [Decimal(r["balance"]) for r in data["rows"]] == [Decimal("500"), Decimal("300")]

    def test_ledger_statement_unknown_ledger(self, client):
        assert client.get("/reports/ledger-statement/NOPE").status_code == 404

    def test_day_book(self, client):
        setup_books(client)

        data = client.get("/reports/day-book", params={"on": "2024-04-10"}).json()

        assert [v["narration"] for v in data] == ["Rent"]

    def test_cash_and_bank(self, client):
        setup_books(client)

        data = client.get("/reports/cash-and-bank", params={"as_of": "2024-04-05"}).json()

        assert Decimal(data["cash_total"]) == Decimal("500")
        assert Decimal(data["inflow"]) == Decimal("500")
