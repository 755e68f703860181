"""
Tests for voucher endpoints.

HTTP concerns only. Posting rules are tested in
test_journal_service.py.
"""

from decimal import Decimal

CASH = "L-1.1.1-1"
SALES = "L-4.1-1"


def voucher_json(debit=500, credit=500, date="2024-04-10", narration="Cash sale"):
    return {
        "date": date,
        "narration": narration,
        "voucher_type": "Receipt",
        "entries": [
            {"side": "DR", "account_id": CASH, "amount": debit},
            {"side": "CR", "account_id": SALES, "amount": credit},
        ],
    }


class TestPostVoucher:

    def test_post_balanced_voucher_returns_201(self, client):
        client.post("/coa/seed")

        response = client.post("/vouchers", json=voucher_json())

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["total_debit"]) == Decimal("500")
        assert [e["line_no"] for e in data["entries"]] == [1, 2]
        assert data["voucher_type"] == "Receipt"

    def test_unbalanced_returns_400_with_totals(self, client):
        client.post("/coa/seed")

        response = client.post("/vouchers", json=voucher_json(debit=100, credit=90))

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert Decimal(detail["total_debit"]) == Decimal("100")
        assert Decimal(detail["total_credit"]) == Decimal("90")
        assert client.get("/vouchers").json() == []

    def test_unknown_account_returns_400(self, client):
        response = client.post("/vouchers", json=voucher_json())

        assert response.status_code == 400
        assert "not found" in response.json()["detail"]

    def test_line_needs_a_side(self, client):
        client.post("/coa/seed")
        payload = voucher_json()
        del payload["entries"][0]["side"]

        response = client.post("/vouchers", json=payload)

        assert response.status_code == 422


class TestVoucherLifecycle:

    def test_get_replace_delete(self, client):
        client.post("/coa/seed")
        voucher_id = client.post("/vouchers", json=voucher_json()).json()["id"]

        assert client.get(f"/vouchers/{voucher_id}").status_code == 200

        replaced = client.put(
            f"/vouchers/{voucher_id}", json=voucher_json(debit=750, credit=750)
        )
        assert replaced.status_code == 200
        assert Decimal(replaced.json()["total_credit"]) == Decimal("750")

        assert client.delete(f"/vouchers/{voucher_id}").status_code == 204
        assert client.get(f"/vouchers/{voucher_id}").status_code == 404

    def test_list_filters_by_date(self, client):
        client.post("/coa/seed")
        client.post("/vouchers", json=voucher_json(date="2024-04-01"))
        client.post("/vouchers", json=voucher_json(date="2024-04-15"))

        response = client.get("/vouchers", params={"from_date": "2024-04-10"})

        assert [v["date"] for v in response.json()] == ["2024-04-15"]

    def test_locked_books_reject_posting(self, client):
        client.post("/coa/seed")
        lock = client.post("/vouchers/lock", json={"locked_through": "2024-04-30"})

        response = client.post("/vouchers", json=voucher_json(date="2024-04-10"))

        assert lock.json() == {"locked_through": "2024-04-30"}
        assert response.status_code == 400
        assert "locked" in response.json()["detail"]

    def test_null_lock_reopens_books(self, client):
        client.post("/coa/seed")
        client.post("/vouchers/lock", json={"locked_through": "2024-04-30"})

        unlock = client.post("/vouchers/lock", json={"locked_through": None})
        response = client.post("/vouchers", json=voucher_json(date="2024-04-10"))

        assert unlock.status_code == 200
        assert unlock.json() == {"locked_through": None}
        assert response.status_code == 201
