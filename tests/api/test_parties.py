"""
Tests for party endpoints.
"""

from sqlalchemy.exc import IntegrityError

from general_ledger.services.party_service import PartyLedgerBinder


class TestParties:

    def test_create_party_returns_201(self, client):
        response = client.post("/parties", json={"name": "Acme", "party_type": "Customer"})

        assert response.status_code == 201
        assert response.json()["coa_ledger_id"] is None

    def test_resolve_ledger(self, client):
        client.post("/coa/seed")
        party_id = client.post(
            "/parties", json={"name": "Steel Mills", "party_type": "Supplier"}
        ).json()["id"]

        first = client.post(f"/parties/{party_id}/ledger")
        second = client.post(f"/parties/{party_id}/ledger")

        assert first.status_code == 200
        assert first.json()["group_id"] == "2.1.1"
        assert second.json()["id"] == first.json()["id"]

    def test_unknown_party_returns_404(self, client):
        assert client.post("/parties/99/ledger").status_code == 404

    def test_persistent_conflict_returns_409(self, client, monkeypatch):
        client.post("/coa/seed")
        party_id = client.post(
            "/parties", json={"name": "Acme", "party_type": "Customer"}
        ).json()["id"]

        def always_conflicts(self, party_id):
            raise IntegrityError("INSERT INTO coa_ledgers", {}, Exception("UNIQUE"))

        monkeypatch.setattr(PartyLedgerBinder, "_resolve", always_conflicts)

        response = client.post(f"/parties/{party_id}/ledger")

        assert response.status_code == 409
        assert "Could not resolve" in response.json()["detail"]
