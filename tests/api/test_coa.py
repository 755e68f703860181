"""
Tests for chart-of-accounts endpoints.

HTTP concerns only: status codes, payload shape and error
mapping. Tree rules are tested in test_chart_service.py.
"""


class TestSeed:

    def test_seed_then_reseed(self, client):
        first = client.post("/coa/seed")
        second = client.post("/coa/seed")

        assert first.status_code == 200
        assert first.json()["groups_created"] > 0
        assert second.json() == {"groups_created": 0, "ledgers_created": 0}

    def test_seeded_group_readable(self, client):
        client.post("/coa/seed")

        response = client.get("/coa/groups/1.1.2")

        assert response.status_code == 200
        assert response.json()["role"] == "TRADE_RECEIVABLES"
        assert response.json()["level"] == 2


class TestGroups:

    def test_create_group_returns_201(self, client):
        response = client.post("/coa/groups", json={
            "id": "1", "name": "Assets", "nature": "ASSET",
        })

        assert response.status_code == 201
        assert response.json()["parent_id"] is None

    def test_duplicate_group_returns_400(self, client):
        client.post("/coa/groups", json={"id": "1", "name": "Assets", "nature": "ASSET"})
        response = client.post("/coa/groups", json={
            "id": "1", "name": "Assets", "nature": "ASSET",
        })

        assert response.status_code == 400

    def test_missing_parent_returns_404(self, client):
        response = client.post("/coa/groups", json={
            "id": "1.1", "name": "Current", "nature": "ASSET", "parent_id": "1",
        })

        assert response.status_code == 404

    def test_cyclic_move_returns_400(self, client):
        client.post("/coa/groups", json={"id": "A", "name": "A", "nature": "ASSET"})
        client.post("/coa/groups", json={
            "id": "B", "name": "B", "nature": "ASSET", "parent_id": "A",
        })

        response = client.patch("/coa/groups/A/parent", json={"parent_id": "B"})

        assert response.status_code == 400
        assert "ancestor" in response.json()["detail"]

    def test_unknown_group_returns_404(self, client):
        assert client.get("/coa/groups/nope").status_code == 404


class TestLedgers:

    def test_create_and_fetch_ledger(self, client):
        client.post("/coa/groups", json={"id": "1", "name": "Assets", "nature": "ASSET"})
        created = client.post("/coa/ledgers", json={
            "id": "CASH",
            "name": "Cash",
            "group_id": "1",
            "nature": "ASSET",
            "ledger_type": "CASH",
            "opening_balance": {"amount": "1000", "dr_cr": "DR"},
        })

        response = client.get("/coa/ledgers/CASH")

        assert created.status_code == 201
        assert response.json()["status"] == "ACTIVE"
        assert response.json()["opening_dr_cr"] == "DR"

    def test_negative_opening_rejected(self, client):
        client.post("/coa/groups", json={"id": "1", "name": "Assets", "nature": "ASSET"})
        response = client.post("/coa/ledgers", json={
            "id": "CASH", "name": "Cash", "group_id": "1", "nature": "ASSET",
            "opening_balance": {"amount": "-5"},
        })

        assert response.status_code == 422

    def test_deactivate(self, client):
        client.post("/coa/seed")

        response = client.patch("/coa/ledgers/L-1.1.1-1/status", json={"status": "INACTIVE"})

        assert response.status_code == 200
        assert response.json()["status"] == "INACTIVE"
