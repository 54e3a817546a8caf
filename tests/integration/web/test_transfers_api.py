"""이체 API 테스트"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from core.ledger.engine import LedgerEngine
from core.ledger.models import Account


def _payload(from_id: str, to_id: str, amount: str = "200") -> dict:
    return {
        "from_account_id": from_id,
        "to_account_id": to_id,
        "amount": amount,
        "concept": "Ahorro",
        "date": "2026-03-10",
    }


class TestTransfersApi:

    @pytest.mark.asyncio
    async def test_create_get_update_delete(
        self, api_client: AsyncClient, engine: LedgerEngine, account_a: Account, account_b: Account
    ) -> None:
        created = await api_client.post("/api/transfers", json=_payload(account_a.id, account_b.id))
        assert created.status_code == 201
        transfer = created.json()["transfer"]
        pair_id = transfer["transfer_pair_id"]
        assert transfer["egreso"]["account_id"] == account_a.id
        assert transfer["ingreso"]["account_id"] == account_b.id
        assert transfer["egreso"]["category_id"] == "transferencias"

        fetched = await api_client.get(f"/api/transfers/{pair_id}")
        assert fetched.status_code == 200
        assert Decimal(fetched.json()["amount"]) == Decimal("200")

        updated = await api_client.patch(f"/api/transfers/{pair_id}", json={"amount": "300"})
        assert updated.status_code == 200
        assert (await engine.accounts.get_account(account_a.id)).current_balance == Decimal("700")
        assert (await engine.accounts.get_account(account_b.id)).current_balance == Decimal("800")

        deleted = await api_client.delete(f"/api/transfers/{pair_id}")
        assert deleted.status_code == 200
        assert (await engine.accounts.get_account(account_a.id)).current_balance == Decimal("1000")
        assert (await engine.accounts.get_account(account_b.id)).current_balance == Decimal("500")

        missing = await api_client.get(f"/api/transfers/{pair_id}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_by_leg(
        self, api_client: AsyncClient, engine: LedgerEngine, account_a: Account, account_b: Account, today
    ) -> None:
        transfer = await engine.transfers.create_transfer(account_a.id, account_b.id, "100", "x", today)

        response = await api_client.delete(f"/api/transfers/by-leg/{transfer.ingreso.id}")

        assert response.status_code == 200
        assert response.json()["transfer"]["transfer_pair_id"] == transfer.transfer_pair_id
        assert await engine.accounts.audit_balances() == []

    @pytest.mark.asyncio
    async def test_same_account(self, api_client: AsyncClient, account_a: Account) -> None:
        response = await api_client.post("/api/transfers", json=_payload(account_a.id, account_a.id))

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "SameAccount"

    @pytest.mark.asyncio
    async def test_currency_mismatch(
        self, api_client: AsyncClient, account_a: Account, account_usd: Account
    ) -> None:
        response = await api_client.post("/api/transfers", json=_payload(account_a.id, account_usd.id))

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "CurrencyMismatch"

    @pytest.mark.asyncio
    async def test_overdraft_warns(
        self, api_client: AsyncClient, account_a: Account, account_b: Account
    ) -> None:
        response = await api_client.post(
            "/api/transfers", json=_payload(account_b.id, account_a.id, amount="600")
        )

        assert response.status_code == 201
        warnings = response.json()["warnings"]
        assert len(warnings) == 1
        assert account_b.id in warnings[0]

    @pytest.mark.asyncio
    async def test_incomplete_pair_is_server_error(
        self, api_client: AsyncClient, engine: LedgerEngine, account_a: Account, account_b: Account, today
    ) -> None:
        transfer = await engine.transfers.create_transfer(account_a.id, account_b.id, "100", "x", today)
        await engine.db.execute("DELETE FROM transactions WHERE id = ?", (transfer.ingreso.id,))
        await engine.db.commit()

        response = await api_client.get(f"/api/transfers/{transfer.transfer_pair_id}")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "IncompleteTransferPair"
