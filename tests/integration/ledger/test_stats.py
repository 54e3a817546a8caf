"""StatsService 통합 테스트"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger.engine import LedgerEngine
from core.ledger.errors import InvalidField
from core.ledger.models import Account
from core.ledger.stats import month_range, shift_month


class TestHelpers:
    def test_month_range(self) -> None:
        assert month_range(2, 2024) == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_range(12, 2026) == (date(2026, 12, 1), date(2026, 12, 31))

    def test_shift_month(self) -> None:
        assert shift_month(3, 2026, -5) == (10, 2025)
        assert shift_month(12, 2026, 1) == (1, 2027)
        assert shift_month(6, 2026, 0) == (6, 2026)


class TestStats:
    """재무 통계"""

    @pytest.mark.asyncio
    async def test_by_category(
        self, engine: LedgerEngine, account_a: Account, account_b: Account
    ) -> None:
        ledger = engine.transactions
        await ledger.create_transaction(account_a.id, "comida", "egreso", "300", "Super", date(2026, 3, 2))
        await ledger.create_transaction(account_a.id, "comida", "egreso", "100", "Verdu", date(2026, 3, 3))
        await ledger.create_transaction(account_a.id, "ocio", "egreso", "200", "Cine", date(2026, 3, 4))
        await ledger.create_transaction(account_a.id, "ocio", "egreso", "999", "Otro mes", date(2026, 4, 1))
        await engine.transfers.create_transfer(account_a.id, account_b.id, "500", "Ahorro", date(2026, 3, 5))

        rows = await engine.stats.expenses_by_category(3, 2026)

        assert rows == [
            {"category_id": "comida", "total_amount": "400", "percentage": "66.67"},
            {"category_id": "ocio", "total_amount": "200", "percentage": "33.33"},
        ]

    @pytest.mark.asyncio
    async def test_by_category_empty(self, engine: LedgerEngine) -> None:
        assert await engine.stats.expenses_by_category(3, 2026) == []

    @pytest.mark.asyncio
    async def test_get_stats(
        self, engine: LedgerEngine, account_a: Account, account_b: Account, account_usd: Account
    ) -> None:
        ledger = engine.transactions
        await ledger.create_transaction(account_a.id, "sueldo", "ingreso", "2000", "Sueldo", date(2026, 3, 1))
        await ledger.create_transaction(account_a.id, "comida", "egreso", "300.25", "Super", date(2026, 3, 2))
        await ledger.create_transaction(account_b.id, "comida", "egreso", "50", "Kiosco", date(2026, 1, 15))
        await engine.transfers.create_transfer(account_a.id, account_b.id, "100", "Ahorro", date(2026, 3, 3))

        stats = await engine.stats.get_stats(3, 2026)

        assert stats["period"] == {"month": 3, "year": 2026}
        assert stats["totals"] == {
            "ingresos": "2000",
            "egresos": "300.25",
            "balance": "1699.75",
        }
        assert stats["por_categoria"] == [
            {"category_id": "comida", "total_amount": "300.25", "percentage": "100.00"},
        ]

        evolution = stats["evolucion_mensual"]
        assert [(e["month"], e["year"]) for e in evolution] == [
            (10, 2025), (11, 2025), (12, 2025), (1, 2026), (2, 2026), (3, 2026),
        ]
        assert evolution[3]["egresos"] == "50"
        assert evolution[-1]["balance"] == "1699.75"

        # 잔액 내림차순 (A: 1000+2000-300.25-100, B: 500-50+100, USD: 100)
        summary = stats["cuentas_resumen"]
        assert [s["account_id"] for s in summary] == [account_a.id, account_b.id, account_usd.id]
        assert summary[0]["current_balance"] == "2599.75"
        assert summary[0]["type"] == "banco"

    @pytest.mark.asyncio
    async def test_defaults_to_today(self, engine: LedgerEngine) -> None:
        stats = await engine.stats.get_stats(today=date(2026, 7, 20))

        assert stats["period"] == {"month": 7, "year": 2026}
        assert stats["totals"]["balance"] == "0"

    @pytest.mark.asyncio
    async def test_inactive_accounts_excluded(self, engine: LedgerEngine) -> None:
        closed = await engine.accounts.create_account("Cerrada", "banco", "ARS", "0")
        await engine.accounts.deactivate_account(closed.id)

        stats = await engine.stats.get_stats(3, 2026)

        assert stats["cuentas_resumen"] == []

    @pytest.mark.asyncio
    async def test_invalid_period(self, engine: LedgerEngine) -> None:
        with pytest.raises(InvalidField):
            await engine.stats.get_stats(13, 2026)

    @pytest.mark.asyncio
    async def test_reads_are_idempotent(
        self, engine: LedgerEngine, account_a: Account
    ) -> None:
        await engine.transactions.create_transaction(
            account_a.id, "comida", "egreso", "10", "Super", date(2026, 3, 2)
        )

        first = await engine.stats.get_stats(3, 2026)
        second = await engine.stats.get_stats(3, 2026)

        assert first == second
