"""End-to-end user workflows and scenarios"""

import csv
import io
from decimal import Decimal

import pytest
from httpx import AsyncClient


async def register(client: AsyncClient, email: str, full_name: str) -> dict:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "SecurePass123!", "full_name": full_name},
    )
    assert response.status_code == 201
    data = response.json()
    return {
        "id": data["user"]["id"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


class TestCompleteDebtWorkflow:
    """Test a debt from registration to settlement"""

    @pytest.mark.asyncio
    async def test_record_track_and_settle_debt(self, client: AsyncClient, tmp_path, monkeypatch):
        """
        Complete workflow:
        - Alice and Bob register
        - Alice records that Bob owes her $25.50 for dinner
        - Bob sees the debt and it shows on both dashboards
        - Bob cannot settle it himself; Alice marks it paid
        - Alice exports her debts as CSV
        - Bob can't delete his account while a debt is open, but can once it's paid
        """
        monkeypatch.setattr("app.services.export_service.settings.export_dir", str(tmp_path))

        alice = await register(client, "alice@example.com", "Alice Smith")
        bob = await register(client, "bob@example.com", "Bob Johnson")

        response = await client.post(
            "/api/v1/debts",
            json={
                "description": "Dinner",
                "amount": "25.50",
                "currency": "USD",
                "creditor_id": alice["id"],
                "debtor_id": bob["id"],
                "category": "food",
            },
            headers=alice["headers"],
        )
        assert response.status_code == 201
        debt_id = response.json()["id"]

        response = await client.get("/api/v1/debts", headers=bob["headers"])
        assert [d["id"] for d in response.json()["items"]] == [debt_id]

        for user in (alice, bob):
            summary = (await client.get("/api/v1/debts/dashboard/summary", headers=user["headers"])).json()
            assert summary["pending_debts"]["count"] == 1
            assert Decimal(summary["pending_debts"]["total_amount"]) == Decimal("25.50")

        response = await client.delete(f"/api/v1/users/{bob['id']}", headers=bob["headers"])
        assert response.status_code == 400

        response = await client.put(f"/api/v1/debts/{debt_id}/mark-as-paid", headers=bob["headers"])
        assert response.status_code == 403

        response = await client.put(f"/api/v1/debts/{debt_id}/mark-as-paid", headers=alice["headers"])
        assert response.status_code == 200

        summary = (await client.get("/api/v1/debts/dashboard/summary", headers=bob["headers"])).json()
        assert summary["pending_debts"]["count"] == 0
        assert summary["paid_debts"]["count"] == 1

        response = await client.post(
            "/api/v1/debts/export", json={"format": "csv", "is_paid": True}, headers=alice["headers"]
        )
        assert response.status_code == 200
        header, row = list(csv.reader(io.StringIO(response.text)))
        exported = dict(zip(header, row))
        assert exported["Status"] == "PAID"
        assert exported["Debtor Name"] == "Bob Johnson"

        response = await client.delete(f"/api/v1/users/{bob['id']}", headers=bob["headers"])
        assert response.status_code == 204
